from fastapi import FastAPI
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.middleware.cors import CORSMiddleware

from storage_proof.config import CONFIG, Settings
from storage_proof.routers import proof
from storage_proof.services.storage_proof import StorageProofProvider

from contextlib import asynccontextmanager


def create_app(settings: Settings = CONFIG, provider: StorageProofProvider | None = None):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Until yield executes before startup
        app.provider = provider or StorageProofProvider.from_network(
            settings.network_config(), batch_lag=settings.batch_lag
        )
        yield

        # Below here executes before shutdown, a passed-in provider belongs to the caller
        if provider is None:
            await app.provider.close()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.allowed_hosts)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(proof.router)

    @app.get("/")
    async def root():
        return {"msg": "zkSync storage proofs", "network": settings.network}

    return app
