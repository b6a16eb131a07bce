from flask import Flask
from flask_restx import Api
from netdiag.config import DefaultConfig
from netdiag.routes.diagnostics import diag_ns

def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object(DefaultConfig)
    app.config.from_prefixed_env("NETDIAG")
    if test_config:
        app.config.from_mapping(test_config)

    api = Api(app, title="Network Diagnostic API", version="1.0",
              description="An API for network diagnostics.", doc="/docs")

    api.add_namespace(diag_ns)

    return app
