"""Docker Registry API v2 async client for tag pruning."""

import asyncio
from typing import Optional

import aiohttp

from ..exceptions import (
    DeletionFailure,
    ManifestResolutionFailure,
    RegistryUnavailable,
)
from ..utils.auth import auth_headers
from .types import MANIFEST_ACCEPT, Manifest, parse_manifest


class RegistryClient:
    """Docker Registry API v2 async client with optional HTTP Basic auth."""

    def __init__(
        self,
        registry_url: str,
        user: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 30,
        connector: Optional[aiohttp.TCPConnector] = None,
    ) -> None:
        """Initialize the registry client.

        Args:
            registry_url: Registry base URL including scheme (e.g., https://registry.example.com)
            user: User name for HTTP Basic auth, anonymous when empty
            password: Password for HTTP Basic auth
            timeout: Request timeout in seconds
            connector: aiohttp connector for connection pooling
        """
        self.registry_url = registry_url.rstrip("/")
        self.timeout = timeout
        self.connector = connector
        self.headers = auth_headers(user, password)
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "RegistryClient":
        """Enter async context manager."""
        if not self.session:
            self.session = aiohttp.ClientSession(
                connector=self.connector,
                headers=self.headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager."""
        await self.close()

    async def close(self) -> None:
        """Close the client session."""
        if self.session and not self.session.closed:
            await self.session.close()

    def _session(self) -> aiohttp.ClientSession:
        if self.session is None:
            raise RuntimeError("RegistryClient must be used as an async context manager")
        return self.session

    def manifest_url(self, image: str, reference: str) -> str:
        return f"{self.registry_url}/v2/{image}/manifests/{reference}"

    async def list_tags(self, image: str) -> list[str]:
        """List tags for an image.

        Args:
            image: Image (repository) name

        Returns:
            List of tag names in registry order

        Raises:
            RegistryUnavailable: If the registry does not answer with success
        """
        url = f"{self.registry_url}/v2/{image}/tags/list"
        try:
            async with self._session().get(url) as resp:
                if resp.status >= 400:
                    raise RegistryUnavailable(
                        f"Failed to list tags of {image}: HTTP {resp.status}",
                        status=resp.status,
                    )
                data = await resp.json(content_type=None)

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RegistryUnavailable(f"Failed to list tags of {image}: {e}") from e
        except ValueError as e:
            raise RegistryUnavailable(f"Invalid tag list for {image}: {e}") from e

        if not isinstance(data, dict):
            raise RegistryUnavailable(f"Invalid tag list for {image}")

        tags = data.get("tags") or []
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise RegistryUnavailable(f"Invalid tag list for {image}: {tags!r}")
        return tags

    async def get_manifest(self, image: str, reference: str) -> Manifest:
        """Retrieve and parse a manifest.

        Args:
            image: Image (repository) name
            reference: Tag or digest reference

        Returns:
            SinglePlatformManifest or ManifestIndex

        Raises:
            ManifestResolutionFailure: If retrieval or parsing fails
        """
        url = self.manifest_url(image, reference)
        try:
            async with self._session().get(
                url, headers={"Accept": MANIFEST_ACCEPT}
            ) as resp:
                if resp.status >= 400:
                    raise ManifestResolutionFailure(
                        f"Failed to get manifest {image}:{reference}: HTTP {resp.status}",
                        tag=reference,
                        status=resp.status,
                    )
                body = await resp.json(content_type=None)
                headers = resp.headers

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ManifestResolutionFailure(
                f"Failed to get manifest {image}:{reference}: {e}", tag=reference
            ) from e
        except ValueError as e:
            raise ManifestResolutionFailure(
                f"Invalid manifest {image}:{reference}: {e}", tag=reference
            ) from e

        try:
            return parse_manifest(body, headers)
        except ManifestResolutionFailure as e:
            e.tag = reference
            raise

    async def delete_manifest(self, image: str, digest: str) -> int:
        """Delete a manifest by digest.

        Args:
            image: Image (repository) name
            digest: Manifest digest

        Returns:
            HTTP status of the successful DELETE

        Raises:
            DeletionFailure: If deletion fails
        """
        url = self.manifest_url(image, digest)
        try:
            async with self._session().delete(url) as resp:
                if resp.status >= 400:
                    raise DeletionFailure(
                        f"Failed to delete manifest {image}@{digest}: HTTP {resp.status}",
                        digest=digest,
                        status=resp.status,
                    )
                return resp.status

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DeletionFailure(
                f"Failed to delete manifest {image}@{digest}: {e}", digest=digest
            ) from e
