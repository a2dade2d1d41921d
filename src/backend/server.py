"""
FastAPI proxy server for the collage editor.

Three stateless endpoints front the AI providers. They hold no session state
beyond one request.

Run:
    cd src
    python -m uvicorn backend.server:app --reload --port 8000
"""
from typing import Optional

import requests
from fastapi import FastAPI, File, Form, Query, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config import Config
from tools.animator import get_animation, output_url, start_animation
from tools.harmonizer import harmonize_image
from tools.image_gen import ImageGenerationError, generate_image


app = FastAPI(
    title="Collage Studio API",
    description="Proxy endpoints for harmonizing, animating and generating collage images",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, **body) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body)


# ─────────────────────────────────────────────────────────────
# Harmonize
# ─────────────────────────────────────────────────────────────

@app.post("/api/gen/harmonize")
async def harmonize_endpoint(
    image: Optional[UploadFile] = File(None),
    instructions: str = Form(""),
):
    """Blend a flattened collage into one coherent photo."""
    if image is None:
        return error_response(400, error="Image is required")

    try:
        content = await image.read()
    except Exception as e:
        print(f"❌ Error reading upload: {e}", flush=True)
        return error_response(500, error="Failed to process image")

    print(f"🎨 Harmonize: {image.filename} {image.content_type} {len(content)} bytes", flush=True)
    if instructions:
        print(f"   📝 Instructions: {instructions}", flush=True)

    try:
        image_b64 = await run_in_threadpool(harmonize_image, content, instructions)
    except Exception as e:
        print(f"❌ Harmonization error: {e}", flush=True)
        return error_response(500, error="Harmonization failed", details=str(e))

    return {
        "success": True,
        "message": "Image harmonized successfully",
        "image": image_b64,
        "instructions": instructions or "No instructions provided",
    }


# ─────────────────────────────────────────────────────────────
# Animate (submit + poll)
# ─────────────────────────────────────────────────────────────

@app.post("/api/gen/animate")
async def animate_submit_endpoint(
    image: Optional[UploadFile] = File(None),
    text: str = Form(""),
):
    """Start an animation. Returns a prediction id straight away."""
    if image is None:
        return error_response(400, error="Image is required")
    if not text or not text.strip():
        return error_response(400, error="Animation text is required")

    try:
        content = await image.read()
    except Exception as e:
        print(f"❌ Error reading upload: {e}", flush=True)
        return error_response(500, error="Failed to process animation request")

    print(f"🎬 Animate: {image.filename} {len(content)} bytes, text={text[:80]!r}", flush=True)

    try:
        prediction = await run_in_threadpool(
            start_animation, content, text, image.content_type or "image/png"
        )
    except Exception as e:
        print(f"❌ Replicate API error: {e}", flush=True)
        return error_response(500, error="Animation processing failed", details=str(e))

    print(f"   Prediction started with ID: {prediction['id']}", flush=True)
    return {
        "success": True,
        "message": "Animation generation started",
        "predictionId": prediction["id"],
        "status": "processing",
    }


@app.get("/api/gen/animate")
async def animate_status_endpoint(prediction_id: Optional[str] = Query(None, alias="id")):
    """Check a prediction. `completed` carries the video URL."""
    if not prediction_id:
        return error_response(400, error="Prediction ID is required")

    try:
        prediction = await run_in_threadpool(get_animation, prediction_id)
    except Exception as e:
        print(f"❌ Error checking prediction {prediction_id}: {e}", flush=True)
        return error_response(500, error="Failed to check prediction status")

    status = prediction.get("status")
    if Config.DEBUG:
        print(f"   ⏳ Prediction {prediction_id}: {status}", flush=True)

    if status == "succeeded":
        return {
            "success": True,
            "status": "completed",
            "videoUrl": output_url(prediction),
            "predictionId": prediction_id,
        }
    if status == "failed":
        return error_response(
            500,
            success=False,
            status="failed",
            error=prediction.get("error") or "Unknown error",
            predictionId=prediction_id,
        )
    return {
        "success": True,
        "status": status,
        "predictionId": prediction_id,
    }


# ─────────────────────────────────────────────────────────────
# Image generation
# ─────────────────────────────────────────────────────────────

class ImageGenRequest(BaseModel):
    """Text-to-image request."""
    prompt: Optional[str] = None


@app.post("/api/gen/imagegen")
async def imagegen_endpoint(request: ImageGenRequest):
    """Generate a still image from a prompt (fixed size, steps and seed)."""
    if not request.prompt:
        return error_response(400, success=False, error="Prompt is required")

    try:
        image_b64 = await run_in_threadpool(generate_image, request.prompt)
    except ImageGenerationError as e:
        return error_response(500, success=False, error=str(e))
    except (requests.RequestException, ValueError) as e:
        print(f"❌ Error in image generation: {e}", flush=True)
        return error_response(500, success=False, error="Internal server error during image generation")

    return {"success": True, "image": image_b64}


# ─────────────────────────────────────────────────────────────
# Health Check
# ─────────────────────────────────────────────────────────────

@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "collage-studio",
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "Collage Studio API",
        "version": "1.0.0",
        "endpoints": {
            "harmonize": "POST /api/gen/harmonize - Harmonize a rendered collage",
            "animate": "POST /api/gen/animate - Start animating a harmonized image",
            "animate_status": "GET /api/gen/animate?id=<predictionId> - Poll an animation",
            "imagegen": "POST /api/gen/imagegen - Generate an image from a prompt",
            "health": "GET /health - Health check",
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
