"""In-memory stand-in for the CGate gateway, served to tests over httpx.ASGITransport."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, StreamingResponse

API_KEY = "test-key"
PREFIX = "/api/client/v1"
TIMESTAMP = "2025-01-01T00:00:00.000Z"


def _provider(key: str, status: str = "active") -> Dict[str, Any]:
    return {
        "_id": f"prov-{key}",
        "key": key,
        "driver": "pinecone",
        "label": key.title(),
        "status": status,
        "createdAt": TIMESTAMP,
        "updatedAt": TIMESTAMP,
    }


def _index(provider_key: str, index_id: str, name: str, dimension: int = 3) -> Dict[str, Any]:
    return {
        "_id": f"idx-{index_id}",
        "key": index_id,
        "indexId": index_id,
        "name": name,
        "dimension": dimension,
        "metric": "cosine",
        "providerKey": provider_key,
        "createdAt": TIMESTAMP,
        "updatedAt": TIMESTAMP,
    }


def _file(bucket_key: str, name: str, size: int) -> Dict[str, Any]:
    return {
        "_id": f"file-{name}",
        "key": name,
        "bucketKey": bucket_key,
        "fileName": name,
        "contentType": "text/plain",
        "size": size,
        "createdAt": TIMESTAMP,
        "updatedAt": TIMESTAMP,
    }


def create_app() -> FastAPI:
    app = FastAPI(title="Fake CGate Gateway")
    app.state.calls = []
    app.state.providers = {"main": _provider("main"), "old": _provider("old", status="inactive")}
    app.state.indexes = {("main", "docs"): _index("main", "docs", "Docs")}
    app.state.vectors = {}
    app.state.files = []
    app.state.sessions = []

    @app.middleware("http")
    async def require_token(request: Request, call_next):
        app.state.calls.append((request.method, request.url.path, dict(request.query_params)))
        if request.headers.get("authorization") != f"Bearer {API_KEY}":
            return JSONResponse(
                status_code=401,
                content={"error": {"message": "Invalid API key", "type": "authentication_error"}},
            )
        return await call_next(request)

    @app.post(f"{PREFIX}/chat/completions")
    async def chat_completions(request: Request):
        body = await request.json()
        prompt = body["messages"][-1]["content"]
        if body.get("stream"):

            async def events():
                for index, word in enumerate(prompt.split()):
                    chunk = {
                        "id": "chatcmpl-1",
                        "object": "chat.completion.chunk",
                        "created": 1700000000,
                        "model": body["model"],
                        "choices": [{"index": 0, "delta": {"content": word}, "finish_reason": None}],
                    }
                    yield f"data: {json.dumps(chunk)}\n\n"
                    if index == 0:
                        yield ": keep-alive\n\n"
                yield "data: [DONE]\n\n"

            return StreamingResponse(events(), media_type="text/event-stream")

        return {
            "id": "chatcmpl-1",
            "object": "chat.completion",
            "created": 1700000000,
            "model": body["model"],
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": f"echo: {prompt}"},
                    "finish_reason": "stop",
                }
            ],
            "usage": {"prompt_tokens": 3, "completion_tokens": 2, "total_tokens": 5},
            "request_id": body.get("request_id"),
        }

    @app.post(f"{PREFIX}/embeddings")
    async def embeddings(request: Request):
        body = await request.json()
        inputs = body["input"] if isinstance(body["input"], list) else [body["input"]]
        return {
            "object": "list",
            "data": [
                {"object": "embedding", "index": i, "embedding": [float(len(text)), 0.5]}
                for i, text in enumerate(inputs)
            ],
            "model": body["model"],
            "usage": {"prompt_tokens": len(inputs), "completion_tokens": 0, "total_tokens": len(inputs)},
        }

    @app.get(f"{PREFIX}/vector/providers")
    async def list_providers(status: Optional[str] = None, driver: Optional[str] = None):
        providers = [
            p
            for p in app.state.providers.values()
            if (status is None or p["status"] == status) and (driver is None or p["driver"] == driver)
        ]
        return {"providers": providers}

    @app.post(f"{PREFIX}/vector/providers")
    async def create_provider(request: Request):
        body = await request.json()
        provider = _provider(body["key"], status=body.get("status", "active"))
        provider.update(driver=body["driver"], label=body["label"])
        app.state.providers[body["key"]] = provider
        return {"provider": provider}

    @app.get(f"{PREFIX}/vector/providers/{{provider_key}}/indexes")
    async def list_indexes(provider_key: str):
        return {"indexes": [idx for (pk, _), idx in app.state.indexes.items() if pk == provider_key]}

    @app.post(f"{PREFIX}/vector/providers/{{provider_key}}/indexes")
    async def create_index(provider_key: str, request: Request):
        body = await request.json()
        index_id = body["name"].lower().replace(" ", "-")
        existing = app.state.indexes.get((provider_key, index_id))
        if existing:
            return {"index": existing, "reused": True}
        index = _index(provider_key, index_id, body["name"], body["dimension"])
        app.state.indexes[(provider_key, index_id)] = index
        return {"index": index, "reused": False}

    @app.get(f"{PREFIX}/vector/providers/{{provider_key}}/indexes/{{index_id}}")
    async def get_index(provider_key: str, index_id: str):
        index = app.state.indexes.get((provider_key, index_id))
        if index is None:
            return JSONResponse(status_code=404, content={"error": "Index not found"})
        return {"index": index, "provider": app.state.providers[provider_key]}

    @app.patch(f"{PREFIX}/vector/providers/{{provider_key}}/indexes/{{index_id}}")
    async def update_index(provider_key: str, index_id: str, request: Request):
        body = await request.json()
        index = app.state.indexes[(provider_key, index_id)]
        index.update(body)
        return {"index": index}

    @app.delete(f"{PREFIX}/vector/providers/{{provider_key}}/indexes/{{index_id}}")
    async def delete_index(provider_key: str, index_id: str):
        removed = app.state.indexes.pop((provider_key, index_id), None)
        return {"success": removed is not None}

    @app.post(f"{PREFIX}/vector/providers/{{provider_key}}/indexes/{{index_id}}/upsert")
    async def upsert_vectors(provider_key: str, index_id: str, request: Request):
        body = await request.json()
        store = app.state.vectors.setdefault((provider_key, index_id), {})
        for vector in body["vectors"]:
            store[vector["id"]] = vector
        return {"success": True}

    @app.post(f"{PREFIX}/vector/providers/{{provider_key}}/indexes/{{index_id}}/query")
    async def query_vectors(provider_key: str, index_id: str, request: Request):
        body = await request.json()
        query = body["query"]
        store = app.state.vectors.get((provider_key, index_id), {})

        def score(vector: Dict[str, Any]) -> float:
            return sum(a * b for a, b in zip(vector["values"], query["vector"]))

        ranked = sorted(store.values(), key=score, reverse=True)[: query.get("topK", 10)]
        matches = [{"id": v["id"], "score": score(v), "metadata": v.get("metadata")} for v in ranked]
        return {"result": {"matches": matches}}

    @app.delete(f"{PREFIX}/vector/providers/{{provider_key}}/indexes/{{index_id}}/vectors")
    async def delete_vectors(provider_key: str, index_id: str, request: Request):
        body = await request.json()
        store = app.state.vectors.get((provider_key, index_id), {})
        for vector_id in body["ids"]:
            store.pop(vector_id, None)
        return {"success": True}

    @app.get(f"{PREFIX}/files/buckets")
    async def list_buckets():
        bucket = {
            "_id": "bucket-1",
            "key": "docs",
            "name": "Docs",
            "provider": "s3",
            "status": "active",
            "createdAt": TIMESTAMP,
            "updatedAt": TIMESTAMP,
        }
        return {"buckets": [bucket], "count": 1}

    @app.get(f"{PREFIX}/files/buckets/{{bucket_key}}")
    async def get_bucket(bucket_key: str):
        if bucket_key != "docs":
            return JSONResponse(status_code=404, content={"error": {"message": "Bucket not found", "type": "not_found"}})
        return {
            "bucket": {
                "_id": "bucket-1",
                "key": "docs",
                "name": "Docs",
                "provider": "s3",
                "status": "active",
            }
        }

    @app.get(f"{PREFIX}/files/buckets/{{bucket_key}}/objects")
    async def list_files(bucket_key: str, search: Optional[str] = None, limit: int = 50, cursor: Optional[str] = None):
        files = [f for f in app.state.files if f["bucketKey"] == bucket_key]
        if search:
            files = [f for f in files if search in f["fileName"]]
        return {"files": files[:limit], "count": len(files), "nextCursor": None}

    @app.post(f"{PREFIX}/files/buckets/{{bucket_key}}/objects")
    async def upload_file(bucket_key: str, request: Request):
        body = await request.json()
        record = _file(bucket_key, body["fileName"], len(body["data"]))
        if body.get("contentType"):
            record["contentType"] = body["contentType"]
        record["metadata"] = body.get("metadata")
        app.state.files.append(record)
        return {"file": record, "message": "uploaded"}

    @app.post(f"{PREFIX}/tracing/sessions")
    async def ingest_session(request: Request):
        body = await request.json()
        app.state.sessions.append(body)
        return {"success": True, "sessionId": body["sessionId"]}

    return app


__all__ = ["API_KEY", "create_app"]
