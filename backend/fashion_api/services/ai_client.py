"""
HTTP client for the external AI engine.

One generic ``request`` with a fixed base URL and timeout; the named operations
below only pick the path, payload and timeout. There is no retry logic. The
blocking ``requests`` calls are run in the threadpool by the async wrappers.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests
from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)


@dataclass
class ImageUpload:
    """Image file read from a multipart request"""
    filename: str
    content: bytes
    content_type: str

    def as_file(self):
        return (self.filename, self.content, self.content_type)


class AIServiceError(Exception):
    """AI engine call failed.

    ``status_code`` and ``payload`` are set when the engine answered with a
    non-2xx response.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        self.message = message
        self.status_code = status_code
        self.payload = payload
        super().__init__(message)

    @property
    def upstream_error(self) -> str:
        if isinstance(self.payload, dict):
            return self.payload.get("error") or self.payload.get("message") or self.message
        return self.message


class AIServiceUnavailable(AIServiceError):
    """Connection to the AI engine was refused."""


class AIServiceTimeout(AIServiceError):
    """AI engine did not answer within the timeout."""


def _decode(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {"error": response.text} if response.text else None


class AIClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 30,
        batch_timeout: float = 60,
        quick_timeout: float = 15,
        style_timeout: float = 20,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.batch_timeout = batch_timeout
        self.quick_timeout = quick_timeout
        self.style_timeout = style_timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings, session: Optional[requests.Session] = None) -> "AIClient":
        return cls(
            base_url=settings.AI_BACKEND_URL,
            timeout=settings.AI_TIMEOUT_SECONDS,
            batch_timeout=settings.AI_BATCH_TIMEOUT_SECONDS,
            quick_timeout=settings.AI_QUICK_TIMEOUT_SECONDS,
            style_timeout=settings.AI_STYLE_TIMEOUT_SECONDS,
            session=session,
        )

    def request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        files=None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Send one request to the engine and return the decoded JSON body.

        Raises:
            AIServiceUnavailable: connection refused
            AIServiceTimeout: no answer within the timeout
            AIServiceError: any other transport failure or a non-2xx response
        """
        url = f"{self.base_url}{path}"
        logger.info(f"AI request: {method} {path}")
        try:
            response = self.session.request(
                method, url, json=json, files=files, timeout=timeout or self.timeout
            )
        except requests.Timeout as e:
            logger.error(f"AI request timed out: {method} {path}")
            raise AIServiceTimeout(f"AI service timed out: {e}")
        except requests.ConnectionError as e:
            logger.error(f"AI service unreachable at {self.base_url}: {e}")
            raise AIServiceUnavailable(f"AI service unreachable: {e}")
        except requests.RequestException as e:
            raise AIServiceError(f"AI request failed: {e}")

        logger.info(f"AI response: {response.status_code} {path}")
        payload = _decode(response)
        if not response.ok:
            logger.error(f"AI response error: {response.status_code} {payload}")
            raise AIServiceError(
                f"AI service responded with {response.status_code}",
                status_code=response.status_code,
                payload=payload,
            )
        return payload

    async def arequest(self, method: str, path: str, **kwargs) -> Any:
        return await run_in_threadpool(self.request, method, path, **kwargs)

    # Named operations

    async def classify_image(self, image: ImageUpload) -> Any:
        return await self.arequest("POST", "/api/classify", files={"image": image.as_file()})

    async def classify_batch(self, images: List[ImageUpload]) -> Any:
        files = [("images", image.as_file()) for image in images]
        return await self.arequest(
            "POST", "/api/classify/batch", files=files, timeout=self.batch_timeout
        )

    async def generate_outfits(self, payload: Dict[str, Any]) -> Any:
        return await self.arequest("POST", "/api/outfits/generate", json=payload)

    async def search_similar(self, payload: Dict[str, Any]) -> Any:
        return await self.arequest(
            "POST", "/api/similarity/search", json=payload, timeout=self.quick_timeout
        )

    async def check_compatibility(self, payload: Dict[str, Any]) -> Any:
        return await self.arequest(
            "POST", "/api/compatibility/check", json=payload, timeout=self.quick_timeout
        )

    async def analyze_attributes(self, image: ImageUpload) -> Any:
        return await self.arequest(
            "POST", "/api/attributes/analyze", files={"image": image.as_file()}
        )

    async def style_recommendations(self, payload: Dict[str, Any]) -> Any:
        return await self.arequest(
            "POST", "/api/style/recommendations", json=payload, timeout=self.style_timeout
        )

    async def query_knowledge(self, payload: Dict[str, Any]) -> Any:
        return await self.arequest(
            "POST", "/api/knowledge/query", json=payload, timeout=self.quick_timeout
        )

    async def health_check(self) -> bool:
        try:
            payload = await self.arequest("GET", "/health", timeout=5)
        except AIServiceError as e:
            logger.warning(f"AI backend health check failed: {e}")
            return False
        return isinstance(payload, dict) and payload.get("success") is True

    def close(self) -> None:
        self.session.close()
