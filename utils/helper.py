from datetime import datetime
from urllib.parse import quote
from fastapi.responses import JSONResponse
from bson import ObjectId


def success_response(message: str, data=None, status_code: int = 200, **extra):
    return JSONResponse(
        status_code=status_code,
        content={"message": message, **serialize_doc(extra), "data": serialize_doc(data)},
    )


def error_response(status_code: int, message: str):
    return JSONResponse(
        status_code=status_code,
        content={"message": message}
    )


def serialize_doc(doc):
    """ObjectId → str and datetime → ISO string, all the way down.

    Documents keep `_id` and also get a plain `id` copy.
    """
    if isinstance(doc, ObjectId):
        return str(doc)

    if isinstance(doc, datetime):
        return doc.isoformat()

    if isinstance(doc, list):
        return [serialize_doc(v) for v in doc]

    if isinstance(doc, dict):
        out = {key: serialize_doc(value) for key, value in doc.items()}
        if "_id" in out:
            out["id"] = out["_id"]
        return out

    return doc


def content_disposition(filename: str, disposition: str = "inline") -> str:
    safe_name = filename.replace('"', "_")
    if safe_name.isascii():
        return f'{disposition}; filename="{safe_name}"'

    # non-ASCII names go in filename* (RFC 5987), with an ASCII fallback
    fallback = safe_name.encode("ascii", "replace").decode("ascii").replace("?", "_")
    return f"{disposition}; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"
