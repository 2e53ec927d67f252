"""
REST API for psola-stretch.

Provides endpoints for pitch-preserving speed change via HTTP.
"""

from fastapi import FastAPI, UploadFile, File, Form, HTTPException, BackgroundTasks
from fastapi.responses import FileResponse
from pydantic import BaseModel
import tempfile
import shutil
from pathlib import Path
import os

from .core.errors import ConfigurationError, InputError, InvariantViolation

app = FastAPI(
    title="PSOLA-Stretch API",
    description="Pitch-preserving speed change by pitch-synchronous overlap-add",
    version="0.1.0"
)


class StretchResult(BaseModel):
    """Response model for stretch results."""
    speed: float
    sample_rate: int
    channels: int
    input_duration: float
    output_duration: float
    steps: int
    voiced_ratio: float
    mean_period: float
    warnings: list[str]


class AudioInfo(BaseModel):
    """Response model for audio info."""
    duration: float
    sample_rate: int
    channels: int
    frames: int
    min_period: int
    max_period: int


def _save_upload(file: UploadFile) -> str:
    suffix = Path(file.filename or "upload.wav").suffix or ".wav"
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
        shutil.copyfileobj(file.file, tmp)
        return tmp.name


def _remove(*paths: str):
    for p in paths:
        if os.path.exists(p):
            os.unlink(p)


def _stretch(tmp_path: str, speed: float, voice: str):
    from psola_stretch import PsolaStretcher, StretchConfig
    from psola_stretch.analyzer.audio import AudioAnalyzer

    try:
        stretcher = PsolaStretcher(config=StretchConfig.for_voice(voice, speed))
        audio, sr = AudioAnalyzer.load(tmp_path)
        return stretcher.stretch(audio, sr)
    except (ConfigurationError, InputError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InvariantViolation as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/")
async def root():
    """API health check."""
    return {"status": "ok", "service": "psola-stretch", "version": "0.1.0"}


@app.post("/adjust")
def adjust_speed(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(...),
    speed: float = Form(...),
    voice: str = Form("default")
):
    """
    Change playback speed while keeping pitch.

    - **file**: Audio file (WAV, FLAC, etc.)
    - **speed**: Playback speed (2.0 = twice as fast)
    - **voice**: Pitch range preset ('default' or 'low')

    Returns the stretched audio as 16-bit WAV.
    """
    from psola_stretch.analyzer.audio import AudioAnalyzer

    tmp_path = _save_upload(file)
    try:
        result, report = _stretch(tmp_path, speed, voice)
    finally:
        _remove(tmp_path)

    with tempfile.NamedTemporaryFile(delete=False, suffix=".wav") as out:
        output_path = out.name
    try:
        AudioAnalyzer.save(result, output_path, report.sample_rate)
    except Exception:
        _remove(output_path)
        raise
    background_tasks.add_task(_remove, output_path)

    return FileResponse(
        output_path,
        media_type="audio/wav",
        filename=f"{Path(file.filename or 'audio').stem}_stretched.wav",
        headers={
            "X-Speed": str(report.speed),
            "X-Input-Duration": str(report.input_duration),
            "X-Output-Duration": str(report.output_duration),
            "X-Steps": str(report.steps),
            "X-Voiced-Ratio": str(report.voiced_ratio),
        },
    )


@app.post("/adjust/json", response_model=StretchResult)
def adjust_speed_json(
    file: UploadFile = File(...),
    speed: float = Form(...),
    voice: str = Form("default")
):
    """
    Stretch audio and return the JSON report (without audio file).
    """
    tmp_path = _save_upload(file)
    try:
        _, report = _stretch(tmp_path, speed, voice)
    finally:
        _remove(tmp_path)

    return StretchResult(
        speed=report.speed,
        sample_rate=report.sample_rate,
        channels=report.channels,
        input_duration=report.input_duration,
        output_duration=report.output_duration,
        steps=report.steps,
        voiced_ratio=report.voiced_ratio,
        mean_period=report.mean_period,
        warnings=report.warnings,
    )


@app.post("/info", response_model=AudioInfo)
def audio_info(
    file: UploadFile = File(...),
    voice: str = Form("default")
):
    """
    Get audio file information and period bounds.
    """
    from psola_stretch import StretchConfig
    from psola_stretch.analyzer.audio import AudioAnalyzer

    tmp_path = _save_upload(file)
    try:
        info = AudioAnalyzer.get_info(tmp_path)
        bounds = StretchConfig.for_voice(voice, 1.0).bounds_for(info['sample_rate'])
    except (ConfigurationError, InputError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    finally:
        _remove(tmp_path)

    return AudioInfo(
        duration=info['duration'],
        sample_rate=info['sample_rate'],
        channels=info['channels'],
        frames=info['frames'],
        min_period=bounds.min_period,
        max_period=bounds.max_period,
    )
