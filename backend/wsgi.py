# Overview: WSGI entry point; `flask --app wsgi` and production servers load the app from here.

from stokpro import create_app

app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=app.extensions["stokpro"].port)
