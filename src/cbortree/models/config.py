from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from .common import UnsupportedPolicy

DEFAULT_MAX_DEPTH = 256
# each nesting level costs one decode_one frame plus a short call for its header;
# this keeps the deepest allowed decode well inside the interpreter's default stack
MAX_DEPTH_CEILING = 256

class DecoderConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_depth: int = Field(DEFAULT_MAX_DEPTH, ge=1, le=MAX_DEPTH_CEILING)
    # reject arguments carried in more bytes than their value needs
    canonical: bool = False
    on_unsupported: UnsupportedPolicy = UnsupportedPolicy.RAISE

DEFAULT_CONFIG = DecoderConfig()

def resolve_config(config: DecoderConfig | None) -> DecoderConfig:
    return DEFAULT_CONFIG if config is None else config
