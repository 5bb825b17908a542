import asyncio
import kopf
import logging
import signal
from kubernetes_asyncio import config
from kubernetes_asyncio.client import CoreV1Api
from kubernetes_asyncio.client.api_client import ApiClient
from secretsync.controller import Controller
from secretsync.handlers import namespaces, probes, secrets
from secretsync.sensors import init_metrics_server, SensorDelegate, PrometheusMonitor
from secretsync.types.settings import Settings

logger = logging.getLogger(__name__)


def _on_controller_done(task: asyncio.Task) -> None:
    """Stop the whole operator if the controller stopped on its own."""
    if task.cancelled():
        return
    error = task.exception()
    if error is None:
        return
    logger.critical(f"Controller terminated: {error}. Stopping operator.")
    # kopf treats SIGTERM as a graceful stop request
    signal.raise_signal(signal.SIGTERM)


@kopf.on.startup()
async def setup(
    settings: kopf.OperatorSettings, memo: kopf.Memo, logger: logging.Logger, **kwargs
):
    # Load Kubernetes config - try in-cluster first (for production), then local kubeconfig (for dev)
    try:
        config.load_incluster_config()
        logger.info("Loaded in-cluster Kubernetes configuration")
    except config.ConfigException:
        logger.info("In-cluster config not found, trying local kubeconfig")
        try:
            await config.load_kube_config()
            logger.info("Loaded local Kubernetes configuration")
        except config.ConfigException as e:
            logger.error(f"Failed to load Kubernetes configuration: {e}")
            raise

    memo.conf = Settings()
    logger.info(
        f"Replicating secrets of type {memo.conf.sync_type} from namespace "
        f"{memo.conf.source_namespace}; protected namespaces: "
        f"{', '.join(sorted(memo.conf.protected_namespaces))}"
    )

    # One ApiClient for all writes to prevent connection leaks
    memo.api_client = ApiClient()

    sensor_delegate = SensorDelegate()
    sensor_delegate.add(PrometheusMonitor())
    memo.sensor = sensor_delegate
    logger.info("Sensor infrastructure initialized with PrometheusMonitor")

    try:
        init_metrics_server(memo.conf.metrics_port)
    except Exception as e:
        logger.error(f"Failed to start metrics server: {e}")
        # Don't fail operator startup if metrics server fails
        logger.warning("Continuing without metrics server")

    memo.controller = Controller(
        memo.conf, CoreV1Api(memo.api_client), sensor=sensor_delegate
    )
    memo.controller_task = asyncio.create_task(memo.controller.run())
    memo.controller_task.add_done_callback(_on_controller_done)

    # Post events to the Kubernetes API for logging >= Warning
    settings.posting.enabled = True
    settings.posting.level = logging.WARNING


@kopf.on.cleanup()
async def cleanup(memo: kopf.Memo, logger: logging.Logger, **kwargs):
    """Cleanup handler for operator shutdown."""
    logger.info("Shutting down operator...")

    controller = getattr(memo, "controller", None)
    if controller is not None:
        controller.stop()
        task = memo.controller_task
        if not task.done():
            # Let an in-flight pass finish its writes
            await task
        logger.info("Controller stopped")

    api_client = getattr(memo, "api_client", None)
    if api_client is not None:
        await api_client.close()
        logger.info("Shared API client closed")

    logger.info("Operator shutdown complete")


__all__ = [
    "namespaces",
    "probes",
    "secrets",
]
