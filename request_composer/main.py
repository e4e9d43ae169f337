import logging

from fastapi import FastAPI

from request_composer.api.v1.composition import router as composition_router
from request_composer.core.config import settings


class ContextFormatter(logging.Formatter):
    """Appends the selection/submission context passed through `extra=` to each line."""

    context_keys = ("service_id", "instance_id", "source_id", "service", "outcome", "url", "reason", "error")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = {key: getattr(record, key) for key in self.context_keys if getattr(record, key, None) not in (None, "")}
        if not context:
            return line
        rendered = " ".join(f"{key}={value!r}" if " " in str(value) else f"{key}={value}" for key, value in context.items())
        return f"{line} [{rendered}]"


def configure_logging(level: str) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    # getLevelName maps a known name to its number and anything else to a string
    numeric = logging.getLevelName(level.upper())
    root.setLevel(numeric if isinstance(numeric, int) else logging.INFO)


configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="Service Request Composer", version="1.0.0")

app.include_router(composition_router, prefix="/api/v1/composition", tags=["composition"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
