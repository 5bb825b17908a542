import datetime
import kopf


# Liveness probe
@kopf.on.probe(id="now")
def get_current_timestamp(**kwargs):
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


@kopf.on.probe(id="synced")
def get_controller_status(memo: kopf.Memo, **kwargs):
    controller = getattr(memo, "controller", None)
    if controller is None:
        return {"state": "starting"}
    if controller.failure is not None:
        raise kopf.PermanentError(f"Controller failed: {controller.failure}")
    return controller.status()
