# ================================================================================================
# scripts/setup/download_models.py - Face Detection Models Download
# ================================================================================================

import argparse
import asyncio
import sys
from typing import List, Optional

import structlog

from app.settings import settings
from core.exceptions import FaceCamException
from services.face_monitor.model_downloader import ModelDownloader
from shared.config.logging_config import configure_logging
from shared.config.model_configs import ModelConfigs

logger = structlog.get_logger(__name__)

async def download_models(model_names: List[str], force: bool = False) -> bool:
    """Download the given models; True when all of them are available locally"""
    detection = settings.face_detection
    logger.info("Starting model download", models_dir=str(detection.models_path), force=force)

    downloader = ModelDownloader(
        detection.models_path,
        timeout=detection.download_timeout,
        max_attempts=detection.download_retries
    )

    configs = {name: ModelConfigs.get(name) for name in model_names}
    for model_name, path, cached in downloader.list_models(configs):
        status = "EXISTS" if cached else "MISSING"
        logger.info("Model status", model=model_name, path=str(path), status=status)

    results = {}
    for model_name, config in configs.items():
        try:
            await downloader.ensure_model(config, force=force)
            results[model_name] = True
        except FaceCamException as e:
            logger.error("Model download failed", model=model_name, error=str(e))
            results[model_name] = False

    successful = sum(1 for success in results.values() if success)
    logger.info("Download summary",
                successful=successful,
                total=len(results),
                failed=len(results) - successful)
    return successful == len(results)

def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Download face detection models")
    parser.add_argument("--force", action="store_true", help="Force re-download existing models")
    parser.add_argument(
        "--model",
        action="append",
        choices=sorted(ModelConfigs.get_all_models()),
        help="Model to download (repeatable, default: the configured detector model)"
    )
    args = parser.parse_args(argv)

    configure_logging(
        log_level=settings.effective_log_level,
        log_format=settings.log_format,
        log_file_path=settings.log_file_path
    )

    models = args.model or [settings.face_detection.detector_model]
    success = asyncio.run(download_models(models, force=args.force))
    return 0 if success else 1

if __name__ == "__main__":
    sys.exit(main())
