"""Pack manifests into the zip payload understood by AKS run-command.

The run-command ``context`` field is a base64 zip whose contents are
unpacked into the command's working directory, so ``kubectl apply -f
manifests/`` sees one file per object.
"""

import base64
import io
import zipfile

from dnse2e.manifests.common import marshal_json

MANIFEST_DIR = "manifests"


def package(objects) -> bytes:
    """Zip *objects* as ``manifests/0.json`` … ``manifests/{N-1}.json`` in input order.

    Objects are neither reordered nor deduplicated, and are not modified.

    Raises:
        ManifestError: if any object cannot be encoded.
    """
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for i, obj in enumerate(objects):
            zf.writestr(f"{MANIFEST_DIR}/{i}.json", marshal_json(obj))
    return buf.getvalue()


def encode_payload(archive: bytes) -> str:
    """Base64 the archive for the run-command ``context`` field."""
    return base64.b64encode(archive).decode("ascii")
