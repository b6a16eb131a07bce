import logging

from netdiag import create_app


def main():
    app = create_app()
    logging.basicConfig(
        level=getattr(logging, str(app.config["LOG_LEVEL"]).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Each request gets its own thread; probes share no state
    app.run(host=app.config["BIND_HOST"], port=int(app.config["BIND_PORT"]), threaded=True)


if __name__ == '__main__':
    main()
