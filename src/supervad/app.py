"""FastAPI application exposing VAD session state and detected segments."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from supervad.audio import AudioManager
from supervad.config import settings
from supervad.logging import get_logger, setup_logging
from supervad.session import Session

setup_logging()
logger = get_logger(__name__)

session: Session | None = None
audio: AudioManager | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    global session, audio
    session = Session.from_settings(settings)
    await session.startup()
    try:
        audio = AudioManager(
            device_index=settings.mic_device_index,
            sample_rate=settings.sample_rate,
            chunk_size=settings.chunk_size,
            on_audio=session.on_audio_chunk,
        )
        audio.start()
    except Exception:
        logger.exception("Audio init failed, running headless")
        audio = None
    logger.info("supervad started", mic=settings.mic_device_index)
    yield
    if audio:
        audio.stop()
    await session.shutdown()
    logger.info("supervad stopped")


app = FastAPI(lifespan=lifespan)


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "state": session.engine.state.value if session else "not_started",
    }


@app.get("/state")
async def state():
    return {"state": session.engine.state.value if session else "not_started"}


@app.get("/segments")
async def segments():
    if not session:
        return {"count": 0, "segments": []}
    summary = session.segment_summary()
    return {"count": len(summary), "segments": summary}


@app.get("/diagnostics")
async def diagnostics():
    if not session:
        return {"status": "not_started"}
    return session.diagnostics()
