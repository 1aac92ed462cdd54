"""
FastAPI Application
===================
Entry point for the Code Complete API.

Run with:
    uvicorn code_complete.web_api.main:app --reload
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from code_complete import __version__
from code_complete.core.config import ConfigError
from code_complete.policy.presets import preset_names
from code_complete.web_api.config import settings
from code_complete.web_api.routers import health, rules, scan

app = FastAPI(
    title="Code Complete API",
    description="Cohesion, complexity and coupling checks for Python code",
    version=__version__,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["Health"])
app.include_router(rules.router, prefix="/rules", tags=["Rules"])
app.include_router(scan.router, prefix="/scan", tags=["Scan"])


# ── error mapping ───────────────────────────────────────────────────

@app.exception_handler(ConfigError)
async def config_error_handler(request: Request, exc: ConfigError):
    """Bad rule names, levels, presets or options are client errors."""
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(SyntaxError)
async def syntax_error_handler(request: Request, exc: SyntaxError):
    return JSONResponse(
        status_code=422,
        content={"detail": f"Syntax error at line {exc.lineno}: {exc.msg}"},
    )


@app.get("/")
async def root():
    """API info, the available presets and the default one."""
    return {
        "name": "Code Complete API",
        "version": __version__,
        "presets": preset_names(),
        "default_preset": settings.DEFAULT_PRESET,
        "docs": "/docs" if settings.DEBUG else "disabled",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
