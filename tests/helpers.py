"""Fake Docker Registry v2 server for tests."""

import hashlib
import json
from typing import Optional, Union

from aiohttp import web

from registry_tag_pruner.core.types import DOCKER_MANIFEST_V2, OCI_INDEX

IMAGE = "team/app"


def make_digest(seed: str) -> str:
    """Generate a valid sha256 digest from a seed string."""
    return f"sha256:{hashlib.sha256(seed.encode('utf-8')).hexdigest()}"


def single_manifest(config_seed: str) -> dict:
    """Single-platform manifest whose config digest derives from ``config_seed``."""
    return {
        "schemaVersion": 2,
        "mediaType": DOCKER_MANIFEST_V2,
        "config": {"digest": make_digest(config_seed)},
        "layers": [],
    }


def manifest_digest(manifest: dict) -> str:
    """Digest the fake registry reports for a manifest body."""
    return make_digest(json.dumps(manifest, sort_keys=True))


def platform_digest(config_seed: str) -> str:
    """Digest of the platform manifest built by ``single_manifest(config_seed)``."""
    return manifest_digest(single_manifest(config_seed))


def index_manifest(platforms: dict[str, str]) -> dict:
    """Manifest index; ``platforms`` maps architecture to a config digest seed."""
    return {
        "schemaVersion": 2,
        "mediaType": OCI_INDEX,
        "manifests": [
            {
                "digest": platform_digest(seed),
                "platform": {"architecture": arch, "os": "linux"},
            }
            for arch, seed in platforms.items()
        ],
    }


class FakeRegistry:
    """In-memory registry serving one or more images.

    Tags map to manifest bodies, or to raw bytes served as they are.
    Untagged manifests (the platform entries of an index) are served by
    digest. Individual endpoints can be made to fail and every request is
    recorded as ``(method, path)``.
    """

    def __init__(self) -> None:
        self.images: dict[str, dict[str, Union[dict, bytes]]] = {}
        self.untagged: dict[str, dict[str, dict]] = {}
        self.tag_list_status: Optional[int] = None
        self.tag_list_body: Optional[dict] = None
        self.manifest_failures: dict[str, int] = {}
        self.fail_manifest_after: dict[str, int] = {}
        self.delete_failures: dict[str, int] = {}
        self.omit_digest_header = False
        self.requests: list[tuple[str, str]] = []
        self.auth_headers: list[Optional[str]] = []

    def add_tag(self, image: str, tag: str, manifest: Union[dict, bytes]) -> None:
        self.images.setdefault(image, {})[tag] = manifest

    def add_index(self, image: str, tag: str, platforms: dict[str, str]) -> dict:
        """Tag an index and serve each of its platform manifests by digest."""
        for seed in platforms.values():
            child = single_manifest(seed)
            self.untagged.setdefault(image, {})[manifest_digest(child)] = child
        manifest = index_manifest(platforms)
        self.add_tag(image, tag, manifest)
        return manifest

    @property
    def deletes(self) -> list[str]:
        """Digests of every DELETE request received."""
        return [
            path.rsplit("/", 1)[-1]
            for method, path in self.requests
            if method == "DELETE"
        ]

    def manifest_gets(self, tag: str) -> int:
        return sum(
            1
            for method, path in self.requests
            if method == "GET" and path.endswith(f"/manifests/{tag}")
        )

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/v2/{image:.+}/tags/list", self.handle_tags)
        app.router.add_get("/v2/{image:.+}/manifests/{reference}", self.handle_get)
        app.router.add_delete("/v2/{image:.+}/manifests/{reference}", self.handle_delete)
        return app

    def _record(self, request: web.Request) -> None:
        self.requests.append((request.method, request.path))
        self.auth_headers.append(request.headers.get("Authorization"))

    async def handle_tags(self, request: web.Request) -> web.Response:
        self._record(request)
        if self.tag_list_status is not None:
            return web.json_response({"errors": []}, status=self.tag_list_status)
        if self.tag_list_body is not None:
            return web.json_response(self.tag_list_body)

        image = request.match_info["image"]
        if image not in self.images:
            return web.json_response({"errors": [{"code": "NAME_UNKNOWN"}]}, status=404)
        return web.json_response({"name": image, "tags": list(self.images[image])})

    def _find(self, image: str, reference: str) -> Optional[Union[dict, bytes]]:
        tags = self.images.get(image, {})
        if reference in tags:
            return tags[reference]
        for manifest in tags.values():
            if isinstance(manifest, dict) and manifest_digest(manifest) == reference:
                return manifest
        return self.untagged.get(image, {}).get(reference)

    async def handle_get(self, request: web.Request) -> web.Response:
        self._record(request)
        image = request.match_info["image"]
        reference = request.match_info["reference"]

        if reference in self.manifest_failures:
            return web.json_response({"errors": []}, status=self.manifest_failures[reference])

        # Fail a tag once it has been served ``n`` times.
        limit = self.fail_manifest_after.get(reference)
        if limit is not None and self.manifest_gets(reference) > limit:
            return web.json_response({"errors": []}, status=404)

        manifest = self._find(image, reference)
        if manifest is None:
            return web.json_response({"errors": [{"code": "MANIFEST_UNKNOWN"}]}, status=404)
        if isinstance(manifest, bytes):
            return web.Response(body=manifest, content_type="application/json")

        headers = {}
        if not self.omit_digest_header:
            headers["Docker-Content-Digest"] = manifest_digest(manifest)
        return web.json_response(manifest, headers=headers)

    async def handle_delete(self, request: web.Request) -> web.Response:
        self._record(request)
        digest = request.match_info["reference"]
        if digest in self.delete_failures:
            return web.json_response({"errors": []}, status=self.delete_failures[digest])
        return web.Response(status=202)
