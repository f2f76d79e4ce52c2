"""CLI entrypoint to run a live EMP client and log its snapshot."""
import argparse
import logging
import threading

from emp_monitor import config
from emp_monitor.contract.gateway import Web3ContractGateway
from emp_monitor.contract.sponsors import make_sponsor_source
from .client import ExpiringMultiPartyClient

logger = logging.getLogger(__name__)


def build_client(args: argparse.Namespace) -> ExpiringMultiPartyClient:
    gateway = Web3ContractGateway(
        emp_address=args.emp_address,
        rpc_url=args.rpc_url,
        request_timeout=config.RPC_TIMEOUT or None,
    )
    source = make_sponsor_source(
        gateway,
        mode="incremental" if args.incremental else config.SPONSOR_DISCOVERY,
        from_block=config.SPONSOR_FROM_BLOCK,
    )
    return ExpiringMultiPartyClient(
        gateway,
        interval=args.poll_seconds,
        sponsor_source=source,
        max_workers=args.max_workers or None,
        scale=10 ** config.FIXED_POINT_DECIMALS,
    )


def log_summary(client: ExpiringMultiPartyClient) -> None:
    snap = client.snapshot()
    if snap is None:
        logger.info("No snapshot yet (%s)", client.status())
        return
    logger.info(
        "Snapshot @%.0f sponsors=%d positions=%d pending_withdrawals=%d undisputed_liquidations=%d",
        snap.timestamp,
        len(snap.sponsors),
        len(snap.positions),
        sum(1 for p in snap.positions if p.has_pending_withdrawal),
        len(snap.undisputed_liquidations),
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a live EMP monitoring client")
    parser.add_argument(
        "--rpc-url",
        default=config.RPC_URL,
        help="JSON-RPC endpoint",
    )
    parser.add_argument(
        "--emp-address",
        default=config.EMP_ADDRESS,
        required=not config.EMP_ADDRESS,
        help="ExpiringMultiParty contract address",
    )
    parser.add_argument(
        "--poll-seconds",
        type=float,
        default=config.POLL_INTERVAL,
        help="Refresh interval seconds",
    )
    parser.add_argument(
        "--incremental",
        action="store_true",
        help="Tail NewSponsor events instead of rescanning from the start block",
    )
    parser.add_argument(
        "--max-workers",
        type=int,
        default=config.MAX_WORKERS,
        help="Cap on concurrent per-sponsor reads (0 = unbounded)",
    )
    args = parser.parse_args()

    config.setup_logging()
    client = build_client(args)
    client.start()

    stop_event = threading.Event()
    try:
        while not stop_event.wait(args.poll_seconds):
            log_summary(client)
    except KeyboardInterrupt:
        logger.info("Shutting down EMP client...")
    finally:
        client.stop(timeout=2.0)


if __name__ == "__main__":  # pragma: no cover
    main()
