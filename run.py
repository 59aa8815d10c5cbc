import logging

import uvicorn

from webgrabber.api.server import create_app
from webgrabber.container import Container


def main(container=None):
    """Start the WebGrabber HTTP service.

    A container can be injected so tests can override providers and avoid
    touching the network or the real state file.
    """
    if container is None:
        container = Container()

    logging.basicConfig(
        level=container.config.LOG_LEVEL() or "INFO",
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = create_app(container)
    uvicorn.run(app, host=container.config.HOST(), port=int(container.config.PORT()))


if __name__ == '__main__':
    main()
