"""
Codec Adapters
==============

Uniform bytes-in/bytes-out wrappers around the gzip family encoders (Zopfli,
or plain DEFLATE as a fallback) and the Brotli encoder. Each adapter
translates the generic configuration into the encoder's own options.
"""

import logging
import zlib
from dataclasses import dataclass
from typing import Any, Dict, Optional

import brotli
import zopfli.gzip

from base_classes import Codec, CodecKind
from pipeline_configs import BrotliConfig, GzipConfig
from pipeline_errors import CodecError

logger = logging.getLogger(__name__)

BROTLI_MODES = {
    1: brotli.MODE_TEXT,
    2: brotli.MODE_FONT,
}

# wbits for a gzip header and trailer around the DEFLATE stream
GZIP_WBITS = zlib.MAX_WBITS | 16


def brotli_mode(mode: Any) -> int:
    """Map the configured mode number to the encoder constant; unknown modes are generic"""
    return BROTLI_MODES.get(mode, brotli.MODE_GENERIC)


@dataclass(frozen=True)
class BrotliParameters:
    """Native Brotli parameter block derived from a BrotliConfig"""
    mode: int
    quality: int
    lgwin: int
    size_hint: int
    disable_literal_context_modeling: bool
    lgblock: Optional[int] = None
    npostfix: Optional[int] = None
    ndirect: Optional[int] = None

    @classmethod
    def from_config(cls, config: BrotliConfig, size_hint: int) -> "BrotliParameters":
        return cls(
            mode=brotli_mode(config.mode),
            quality=config.quality,
            lgwin=config.lgwin,
            size_hint=size_hint,
            disable_literal_context_modeling=config.enable_context_modeling is False,
            lgblock=config.lgblock,
            npostfix=config.npostfix,
            ndirect=config.ndirect,
        )

    def encoder_kwargs(self) -> Dict[str, int]:
        """Keyword arguments accepted by ``brotli.compress``"""
        kwargs = {
            'mode': self.mode,
            'quality': self.quality,
            'lgwin': self.lgwin,
        }
        if self.lgblock is not None:
            kwargs['lgblock'] = self.lgblock
        return kwargs

    def unsupported(self) -> Dict[str, Any]:
        """Parameters set here that the Python binding has no argument for"""
        extra: Dict[str, Any] = {}
        if self.disable_literal_context_modeling:
            extra['disable_literal_context_modeling'] = True
        if self.npostfix is not None:
            extra['npostfix'] = self.npostfix
        if self.ndirect is not None:
            extra['ndirect'] = self.ndirect
        return extra


class GzipCodec(Codec):
    """Zopfli gzip output, or zlib DEFLATE when ``config.zlib`` is set"""

    kind = CodecKind.GZIP

    def encode(self, data: bytes, config: GzipConfig) -> bytes:
        try:
            if config.zlib:
                compressor = zlib.compressobj(
                    config.zlib_level, zlib.DEFLATED, GZIP_WBITS, config.zlib_mem_level)
                return compressor.compress(data) + compressor.flush()
            return zopfli.gzip.compress(
                data,
                numiterations=config.numiterations,
                blocksplitting=int(config.blocksplitting),
                blocksplittinglast=int(config.blocksplittinglast),
                blocksplittingmax=config.blocksplittingmax,
            )
        except Exception as e:
            raise CodecError(self.kind.value, "gzip encoding failed", cause=e)


class BrotliCodec(Codec):
    """Brotli output with the parameter block built from the input size"""

    kind = CodecKind.BROTLI

    def encode(self, data: bytes, config: BrotliConfig) -> bytes:
        params = BrotliParameters.from_config(config, size_hint=len(data))
        unsupported = params.unsupported()
        if unsupported:
            logger.warning(f"brotli binding ignores parameters: {unsupported}")
        try:
            return brotli.compress(data, **params.encoder_kwargs())
        except Exception as e:
            raise CodecError(self.kind.value, "brotli encoding failed", cause=e)


CODECS: Dict[CodecKind, Codec] = {
    CodecKind.GZIP: GzipCodec(),
    CodecKind.BROTLI: BrotliCodec(),
}


def encode(kind: CodecKind, data: bytes, config: Any) -> bytes:
    """Compress ``data`` with the codec for ``kind``"""
    return CODECS[kind].encode(data, config)
