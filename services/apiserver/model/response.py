import random
import socket
import threading
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

_MAX_RANDOM_INT = 2**31 - 1


class SimpleResponse(BaseModel):
    """Informational echo returned by every REST endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    host_string: str = Field(alias="hostString")
    path_string: str = Field(alias="pathString")
    time_string: str = Field(alias="timeString")
    random_integer: int = Field(alias="randomInteger")
    thread_id: str = Field(alias="threadID")


def new_simple_response(path: str) -> SimpleResponse:
    return SimpleResponse(
        host_string=socket.gethostname(),
        path_string=path,
        time_string=datetime.now(timezone.utc).isoformat(),
        random_integer=random.randint(0, _MAX_RANDOM_INT),
        thread_id=str(threading.get_ident()),
    )
