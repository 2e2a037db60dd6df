"""Handles describing resources owned by a running scope."""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from pgfixture.models.connection import ConnectionParameters


class ServerHandle(BaseModel):
    """
    A running ephemeral server container.

    Attributes:
        container_id: Docker container id
        container_name: Docker container name
        image: Image the container was launched from
        params: Administrative connection parameters for the server
    """

    model_config = ConfigDict(frozen=True)

    container_id: str
    container_name: str
    image: str
    params: ConnectionParameters


class DatabaseHandle(BaseModel):
    """
    A temporary database created inside a server.

    Attributes:
        name: Generated database name
        role: Owning role when the database was created with an isolated role
        params: Connection parameters pointing at the database
    """

    model_config = ConfigDict(frozen=True)

    name: str
    role: Optional[str] = None
    params: ConnectionParameters
