"""FastAPI application for the checkout tools."""

from fastapi import FastAPI

from agentcheckout import __version__
from agentcheckout.api.routes import router
from agentcheckout.sdk import CheckoutSDK


def create_app(sdk: CheckoutSDK) -> FastAPI:
    app = FastAPI(
        title="Checkout Tools API",
        version=__version__,
        description="Checkout tools for AI agents: search, order, pay and track purchases",
    )

    # Inject SDK into app state for route access
    app.state.sdk = sdk

    # Mount routes
    app.include_router(router, prefix="/v1")

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "version": app.version}

    return app
