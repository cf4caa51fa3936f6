"""FastAPI server for the Virtual Try-On studio.

Serves the single page and the JSON endpoints it calls:
- upload a subject photo and an outfit photo
- trigger generation and receive the resulting state
"""

import logging
from contextlib import asynccontextmanager
from importlib import resources

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel

from tryon_studio import __version__
from tryon_studio.config import AppConfig
from tryon_studio.errors import InputError, IntakeError
from tryon_studio.logging_setup import configure_logging
from tryon_studio.models import ApplicationState, Phase, Slot
from tryon_studio.services import GeminiClient, capture_upload, decode_data_url
from tryon_studio.shell import TryOnSession

logger = logging.getLogger("tryon_studio.api")


class StateView(BaseModel):
    """What the page renders."""
    phase: Phase
    can_try_on: bool
    in_flight: bool
    has_subject: bool
    has_outfit: bool
    subject_image: str | None = None  # data URL
    outfit_image: str | None = None  # data URL
    result_image: str | None = None  # data URL
    error: str | None = None

    @classmethod
    def from_state(cls, state: ApplicationState) -> "StateView":
        return cls(
            phase=state.phase,
            can_try_on=state.can_try_on,
            in_flight=state.in_flight,
            has_subject=state.subject_image is not None,
            has_outfit=state.outfit_image is not None,
            subject_image=state.subject_image.to_data_url() if state.subject_image else None,
            outfit_image=state.outfit_image.to_data_url() if state.outfit_image else None,
            result_image=state.result.to_data_url() if state.result else None,
            error=state.error_message,
        )


class TryOnRequest(BaseModel):
    """Request body for stateless try-on generation."""
    model_photo: str  # Base64 data URL
    garment_photo: str  # Base64 data URL


class TryOnResponse(BaseModel):
    """Response with generated image."""
    success: bool
    image_base64: str | None = None
    media_type: str | None = None
    error: str | None = None


# Initialized on first request
_config: AppConfig | None = None
_client: GeminiClient | None = None
_session: TryOnSession | None = None


def get_config() -> AppConfig:
    global _config
    if _config is None:
        _config = AppConfig()  # Loads from .env automatically via pydantic-settings
    return _config


def get_client() -> GeminiClient:
    """Get or create the generation client."""
    global _client
    if _client is None:
        config = get_config()
        _client = GeminiClient(config.gemini, api_key=config.gemini_api_key)
    return _client


def get_session() -> TryOnSession:
    """Get or create the page session."""
    global _session
    if _session is None:
        _session = TryOnSession(get_client())
    return _session


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(get_config().log_level)
    yield
    if _client is not None:
        await _client.close()


app = FastAPI(
    title="Virtual Try-On Studio",
    description="Upload a photo and an outfit, get a photorealistic try-on from Gemini",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _parse_slot(slot: str) -> Slot:
    try:
        return Slot(slot)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown image slot: {slot}")


@app.get("/", response_class=HTMLResponse)
async def index():
    """Serve the page. Loading it starts a fresh session."""
    get_session().reset()
    page = resources.files("tryon_studio").joinpath("static/index.html").read_text(encoding="utf-8")
    return HTMLResponse(page)


@app.get("/health")
async def health():
    """Detailed health check."""
    connected = await get_client().check_connection()

    return {
        "status": "ok" if connected else "degraded",
        "generation": "connected" if connected else "disconnected",
        "version": __version__,
    }


@app.get("/api/state", response_model=StateView)
async def get_state():
    return StateView.from_state(get_session().state)


@app.post("/api/images/{slot}", response_model=StateView)
async def upload_image(slot: str, file: UploadFile = File(...)):
    """Capture an uploaded image into the subject or outfit slot.

    A file that cannot be read as an image is rejected with 422 and the
    current state is left as it was.
    """
    target = _parse_slot(slot)
    try:
        image = await capture_upload(file, max_bytes=get_config().intake.max_bytes)
    except IntakeError as e:
        raise HTTPException(status_code=422, detail=e.message)

    state = get_session().upload(target, image)
    return StateView.from_state(state)


@app.post("/api/tryon", response_model=StateView)
async def generate_tryon():
    """Generate a try-on from the two uploaded images.

    Returns the resolved state: `succeeded` with the image, or `failed` with
    a message. Returns 409 if the trigger is not currently enabled.
    """
    session = get_session()
    try:
        state = await session.try_on()
    except InputError as e:
        return JSONResponse(
            status_code=409,
            content={
                "detail": e.message,
                "state": StateView.from_state(session.state).model_dump(mode="json"),
            },
        )
    return StateView.from_state(state)


@app.post("/api/reset", response_model=StateView)
async def reset():
    return StateView.from_state(get_session().reset())


@app.post("/api/tryon/direct", response_model=TryOnResponse)
async def generate_tryon_direct(request: TryOnRequest):
    """Stateless try-on for scripts and other clients.

    Args:
        request: Contains the person photo and the outfit photo as base64 data URLs

    Returns:
        Base64-encoded generated image, or the error message
    """
    try:
        max_bytes = get_config().intake.max_bytes
        subject = decode_data_url(request.model_photo, max_bytes=max_bytes)
        outfit = decode_data_url(request.garment_photo, max_bytes=max_bytes)

        image = await get_client().generate_tryon(subject, outfit)

        return TryOnResponse(
            success=True,
            image_base64=image.to_base64(),
            media_type=image.media_type,
        )

    except Exception as e:
        logger.warning("Direct try-on failed: %s", e)
        return TryOnResponse(
            success=False,
            error=str(e),
        )


if __name__ == "__main__":
    import uvicorn
    server = get_config().server
    uvicorn.run(app, host=server.host, port=server.port)
