# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe request/response models."""

from dataclasses import dataclass
from enum import Enum


class ProbeKind(str, Enum):
    CAPABILITY = "capability"
    WORK_SIMULATION = "work_simulation"


@dataclass(frozen=True)
class ProbeRequest:
    kind: ProbeKind
    host: str
    port: int
    service: str
    payload: bytes

    @property
    def length(self) -> int:
        return len(self.payload)


@dataclass(frozen=True)
class ProbeResponse:
    kind: ProbeKind
    raw: bytes = b""
    elapsed: float = 0.0

    @property
    def text(self) -> str:
        # latin-1 maps every byte, so label offsets match the raw bytes.
        return self.raw.decode("latin-1")

    @property
    def empty(self) -> bool:
        return not self.raw
