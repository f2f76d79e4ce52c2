"""FastAPI bootstrap wiring a live EMP client to the read-only snapshot API."""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from emp_monitor import config
from emp_monitor.contract.gateway import Web3ContractGateway
from emp_monitor.contract.sponsors import make_sponsor_source
from emp_monitor.state import snapshot_api
from emp_monitor.state.client import ExpiringMultiPartyClient


def create_client() -> ExpiringMultiPartyClient:
    gateway = Web3ContractGateway(
        emp_address=config.EMP_ADDRESS,
        rpc_url=config.RPC_URL,
        request_timeout=config.RPC_TIMEOUT or None,
    )
    return ExpiringMultiPartyClient(
        gateway,
        interval=config.POLL_INTERVAL,
        sponsor_source=make_sponsor_source(
            gateway, mode=config.SPONSOR_DISCOVERY, from_block=config.SPONSOR_FROM_BLOCK
        ),
        max_workers=config.MAX_WORKERS or None,
        scale=10 ** config.FIXED_POINT_DECIMALS,
    )


def create_app(client: Optional[ExpiringMultiPartyClient] = None) -> FastAPI:
    config.setup_logging()
    name = config.CONTRACT_NAME

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        c = client or create_client()
        snapshot_api.register_client(name, c)
        c.start()
        try:
            yield
        finally:
            c.stop(timeout=2.0)

    app = FastAPI(title="EMP Monitor API", version="0.1.0", lifespan=lifespan)
    snapshot_api.attach_to_app(app)
    return app


app = create_app()
