"""Gateways over the backend HTTP API using httpx.

Non-2xx responses and transport errors are translated into the error
taxonomy; the message comes from the body's ``detail`` (FastAPI) or
``message`` field when present.
"""

import logging
from typing import Any, Callable, List, Mapping, Optional

import httpx

from form_builder.errors import SchemaFetchError, SchemaPublishError, SubmissionError
from form_builder.gateways.protocol import CreatedSubmission, PublishedSchema, submission_payload
from form_builder.schemas.form_schema import FormSchema, StoredSchema, Submission

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def error_message(response: httpx.Response) -> str:
    """Best-effort error text from a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("detail", "message"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    return f"HTTP error! Status: {response.status_code}"


class _HttpGateway:
    """Shared client handling for the HTTP gateways."""

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Args:
            base_url: API root, e.g. ``http://localhost:8000/api``.
            client: Client to use (tests pass one with a MockTransport).
                Created lazily otherwise.
            timeout: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        logger.debug(f"{method} {self._url(path)}")
        return await self.client.request(method, self._url(path), **kwargs)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()


class HttpSchemaGateway(_HttpGateway):
    """SchemaGateway backed by ``/schemas`` and ``/upload/schema``."""

    async def get_active_schema(self) -> StoredSchema:
        try:
            response = await self._request("GET", "/schemas/active")
        except httpx.HTTPError as e:
            raise SchemaFetchError(f"Could not reach the schema service: {e}", original_error=e)

        if response.status_code == 404:
            raise SchemaFetchError(error_message(response), not_found=True)
        if response.is_error:
            raise SchemaFetchError(error_message(response))
        try:
            return StoredSchema.model_validate(response.json())
        except ValueError as e:
            raise SchemaFetchError("Received an invalid schema from the server", original_error=e)

    async def list_schemas(self) -> List[StoredSchema]:
        try:
            response = await self._request("GET", "/schemas")
        except httpx.HTTPError as e:
            raise SchemaFetchError(f"Could not reach the schema service: {e}", original_error=e)
        if response.is_error:
            raise SchemaFetchError(error_message(response))
        try:
            return [StoredSchema.model_validate(item) for item in response.json()]
        except (ValueError, TypeError) as e:
            raise SchemaFetchError("Received an invalid schema list from the server", original_error=e)

    async def publish_schema(self, schema: FormSchema) -> PublishedSchema:
        return await self._publish("POST", "/schemas", json=schema.to_definition())

    async def publish_schema_file(
        self, content: bytes, content_type: str, filename: str = "schema.json"
    ) -> PublishedSchema:
        files = {"schemaFile": (filename, content, content_type)}
        return await self._publish("POST", "/upload/schema", files=files)

    async def activate_schema(self, schema_id: int) -> PublishedSchema:
        return await self._publish("PUT", f"/schemas/{schema_id}/activate")

    async def _publish(self, method: str, path: str, **kwargs: Any) -> PublishedSchema:
        try:
            response = await self._request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise SchemaPublishError(f"Could not reach the schema service: {e}", original_error=e)
        if response.is_error:
            raise SchemaPublishError(error_message(response))
        try:
            body = response.json()
            return PublishedSchema(id=body["id"], title=body["title"])
        except (ValueError, KeyError, TypeError) as e:
            raise SchemaPublishError("Received an invalid publish response from the server", original_error=e)


class HttpSubmissionGateway(_HttpGateway):
    """SubmissionGateway backed by ``/submissions``."""

    async def create_submission(self, form_title: str, data: Mapping[str, Any]) -> CreatedSubmission:
        try:
            response = await self._request("POST", "/submissions", json=submission_payload(form_title, data))
        except httpx.HTTPError as e:
            raise SubmissionError(f"Could not reach the submission service: {e}", original_error=e)
        if response.is_error:
            raise SubmissionError(error_message(response))
        submission = _parse_submission(response.json)
        return CreatedSubmission(id=submission.id, created_at=submission.created_at)

    async def list_submissions(self) -> List[Submission]:
        try:
            response = await self._request("GET", "/submissions")
        except httpx.HTTPError as e:
            raise SubmissionError(f"Could not reach the submission service: {e}", original_error=e)
        if response.is_error:
            raise SubmissionError(error_message(response))
        try:
            return [Submission.model_validate(item) for item in response.json()]
        except (ValueError, TypeError) as e:
            raise SubmissionError("Received an invalid submission list from the server", original_error=e)

    async def get_submission(self, submission_id: int) -> Submission:
        try:
            response = await self._request("GET", f"/submissions/{submission_id}")
        except httpx.HTTPError as e:
            raise SubmissionError(f"Could not reach the submission service: {e}", original_error=e)
        if response.status_code == 404:
            raise SubmissionError(error_message(response), not_found=True)
        if response.is_error:
            raise SubmissionError(error_message(response))
        return _parse_submission(response.json)


def _parse_submission(read_body: Callable[[], Any]) -> Submission:
    try:
        return Submission.model_validate(read_body())
    except ValueError as e:
        raise SubmissionError("Received an invalid submission from the server", original_error=e)
