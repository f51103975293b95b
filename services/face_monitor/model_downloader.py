# ================================================================================================
# services/face_monitor/model_downloader.py - Face Detection Model Download
# ================================================================================================

import asyncio
import aiohttp
from pathlib import Path
import structlog
from typing import Dict, List, Optional, Tuple

from core.exceptions import ModelDownloadError
from shared.config.model_configs import ModelConfig
from shared.decorators.retry import retry

logger = structlog.get_logger(__name__)

CHUNK_SIZE = 8192
NETWORK_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)

class ModelDownloader:
    """Download model files once and reuse the cached copies"""

    def __init__(self, models_dir: Path, timeout: int = 600, max_attempts: int = 3):
        self.models_dir = Path(models_dir)
        self.timeout = timeout
        self.max_attempts = max_attempts

    def model_folder(self, config: ModelConfig) -> Path:
        return self.models_dir / config.name

    def topology_path(self, config: ModelConfig) -> Path:
        return self.model_folder(config) / config.topology_file

    def missing_files(self, config: ModelConfig) -> List[str]:
        folder = self.model_folder(config)
        return [name for name in config.files if not (folder / name).exists()]

    def is_cached(self, config: ModelConfig) -> bool:
        return not self.missing_files(config)

    async def download_file(
        self,
        session: aiohttp.ClientSession,
        url: str,
        filepath: Path
    ) -> int:
        """Download one file, retrying transient network errors. Returns bytes written."""
        download = retry(
            max_attempts=self.max_attempts,
            delay=1.0,
            exceptions=NETWORK_ERRORS
        )(self._download_once)
        return await download(session, url, filepath)

    async def _download_once(
        self,
        session: aiohttp.ClientSession,
        url: str,
        filepath: Path
    ) -> int:
        part_path = filepath.with_name(filepath.name + ".part")
        logger.info("Downloading model file", url=url, filepath=str(filepath))

        try:
            async with session.get(url) as response:
                if response.status != 200:
                    raise ModelDownloadError(
                        f"Download of {url} failed with HTTP {response.status}",
                        url=url,
                        status_code=response.status
                    )

                downloaded = 0
                filepath.parent.mkdir(parents=True, exist_ok=True)
                with open(part_path, 'wb') as f:
                    async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                        f.write(chunk)
                        downloaded += len(chunk)
        except BaseException:
            if part_path.exists():
                part_path.unlink()  # Cleanup partial download
            raise

        part_path.replace(filepath)
        logger.info("Download completed", filepath=str(filepath), size_mb=f"{downloaded / 1024 / 1024:.2f}")
        return downloaded

    async def ensure_model(
        self,
        config: ModelConfig,
        force: bool = False,
        session: Optional[aiohttp.ClientSession] = None
    ) -> Path:
        """Make sure topology + weights exist locally; return the topology path"""
        folder = self.model_folder(config)
        folder.mkdir(parents=True, exist_ok=True)

        to_fetch = config.files if force else self.missing_files(config)
        if not to_fetch:
            logger.info("Model already exists", model=config.name, path=str(folder))
            return self.topology_path(config)

        logger.info("Downloading model", model=config.name, path=str(folder), files=to_fetch)
        if session is not None:
            await self._fetch_files(session, config, to_fetch)
        else:
            async with aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as own_session:
                await self._fetch_files(own_session, config, to_fetch)

        return self.topology_path(config)

    async def _fetch_files(self, session: aiohttp.ClientSession, config: ModelConfig, names: List[str]) -> None:
        folder = self.model_folder(config)
        for name in names:
            url = config.urls.get(name)
            if url is None:
                raise ModelDownloadError(f"No download URL for {name} of model {config.name}")
            try:
                await self.download_file(session, url, folder / name)
            except NETWORK_ERRORS as e:
                raise ModelDownloadError(f"Network error downloading {url}: {e}", url=url) from e

    def ensure_model_sync(self, config: ModelConfig, force: bool = False) -> Path:
        """Blocking wrapper for callers outside an event loop"""
        return asyncio.run(self.ensure_model(config, force=force))

    def list_models(self, configs: Dict[str, ModelConfig]) -> List[Tuple[str, Path, bool]]:
        """List models with their local folder and cache status"""
        return [(name, self.model_folder(config), self.is_cached(config))
                for name, config in configs.items()]
