"""
Unit tests for codec adapters
=============================

Tests for pipeline/stages/codecs.py including:
- Brotli mode mapping and context modeling inversion
- Optional Brotli knobs (absence is not zero)
- Gzip encoder selection (Zopfli vs zlib fallback)
- Codec error wrapping
"""

import gzip
import logging
from unittest.mock import patch

import brotli
import pytest

from base_classes import CodecKind
from pipeline.stages.codecs import (
    BrotliCodec, BrotliParameters, GzipCodec, brotli_mode, encode
)
from pipeline_configs import BrotliConfig, GzipConfig
from pipeline_errors import CodecError


class TestBrotliParameters:
    """Test translation of BrotliConfig into the native parameter block"""

    def test_mode_mapping(self):
        """Test 1 maps to text, 2 to font, anything else to generic"""
        assert brotli_mode(1) == brotli.MODE_TEXT
        assert brotli_mode(2) == brotli.MODE_FONT
        assert brotli_mode(0) == brotli.MODE_GENERIC
        assert brotli_mode(7) == brotli.MODE_GENERIC
        assert brotli_mode(None) == brotli.MODE_GENERIC
        assert brotli_mode("1") == brotli.MODE_GENERIC

    def test_context_modeling_is_inverted(self):
        """Test enable_context_modeling=False sets disable_literal_context_modeling"""
        disabled = BrotliParameters.from_config(
            BrotliConfig(enable_context_modeling=False), size_hint=10)
        enabled = BrotliParameters.from_config(BrotliConfig(), size_hint=10)

        assert disabled.disable_literal_context_modeling is True
        assert enabled.disable_literal_context_modeling is False

    def test_quality_window_and_size_hint_pass_through(self):
        """Test quality and lgwin pass through and size hint comes from the input"""
        params = BrotliParameters.from_config(
            BrotliConfig(quality=7, lgwin=20, mode=1), size_hint=12345)

        assert params.quality == 7
        assert params.lgwin == 20
        assert params.mode == brotli.MODE_TEXT
        assert params.size_hint == 12345

    def test_optional_knobs_absent_by_default(self):
        """Test lgblock, npostfix and ndirect stay unset unless configured"""
        params = BrotliParameters.from_config(BrotliConfig(), size_hint=1)

        assert params.lgblock is None
        assert params.npostfix is None
        assert params.ndirect is None
        assert 'lgblock' not in params.encoder_kwargs()
        assert params.unsupported() == {}

    def test_explicit_zero_knobs_are_kept(self):
        """Test explicitly configured zeros are carried, not dropped"""
        params = BrotliParameters.from_config(
            BrotliConfig(lgblock=0, npostfix=0, ndirect=0), size_hint=1)

        assert params.encoder_kwargs()['lgblock'] == 0
        assert params.unsupported() == {'npostfix': 0, 'ndirect': 0}

    def test_encoder_kwargs(self):
        """Test keyword arguments handed to brotli.compress"""
        params = BrotliParameters.from_config(
            BrotliConfig(mode=2, quality=4, lgwin=18, lgblock=16), size_hint=99)

        assert params.encoder_kwargs() == {
            'mode': brotli.MODE_FONT,
            'quality': 4,
            'lgwin': 18,
            'lgblock': 16,
        }


class TestGzipCodec:
    """Test the gzip family adapter"""

    def test_zopfli_output_is_valid_gzip(self, compressible_bytes):
        """Test the default Zopfli path produces a gzip stream"""
        compressed = GzipCodec().encode(compressible_bytes, GzipConfig(numiterations=1))

        assert gzip.decompress(compressed) == compressible_bytes
        assert len(compressed) < len(compressible_bytes)

    def test_zopfli_receives_knobs_verbatim(self):
        """Test iteration and block splitting settings reach the encoder"""
        config = GzipConfig(numiterations=3, blocksplitting=False,
                            blocksplittinglast=True, blocksplittingmax=7)

        with patch('pipeline.stages.codecs.zopfli.gzip.compress', return_value=b'x') as mock_compress:
            GzipCodec().encode(b'data', config)

        mock_compress.assert_called_once_with(
            b'data', numiterations=3, blocksplitting=0,
            blocksplittinglast=1, blocksplittingmax=7)

    def test_zlib_fallback(self, compressible_bytes):
        """Test zlib=True bypasses Zopfli and still writes gzip"""
        with patch('pipeline.stages.codecs.zopfli.gzip.compress') as mock_zopfli:
            compressed = GzipCodec().encode(
                compressible_bytes, GzipConfig(zlib=True, zlib_level=6, zlib_mem_level=8))

        mock_zopfli.assert_not_called()
        assert gzip.decompress(compressed) == compressible_bytes

    def test_encoder_failure_raises_codec_error(self):
        """Test encoder exceptions surface as CodecError"""
        with patch('pipeline.stages.codecs.zopfli.gzip.compress', side_effect=ValueError("boom")):
            with pytest.raises(CodecError) as exc_info:
                GzipCodec().encode(b'data', GzipConfig())

        assert exc_info.value.codec == 'gzip'
        assert isinstance(exc_info.value.cause, ValueError)


class TestBrotliCodec:
    """Test the Brotli adapter"""

    def test_output_is_valid_brotli(self, compressible_bytes):
        """Test encoded data decompresses back to the input"""
        compressed = BrotliCodec().encode(compressible_bytes, BrotliConfig(quality=5))

        assert brotli.decompress(compressed) == compressible_bytes
        assert len(compressed) < len(compressible_bytes)

    def test_passes_mapped_parameters(self):
        """Test brotli.compress receives the mapped mode"""
        with patch('pipeline.stages.codecs.brotli.compress', return_value=b'x') as mock_compress:
            BrotliCodec().encode(b'abc', BrotliConfig(mode=1, quality=9, lgwin=21))

        mock_compress.assert_called_once_with(
            b'abc', mode=brotli.MODE_TEXT, quality=9, lgwin=21)

    def test_encoder_failure_raises_codec_error(self):
        """Test brotli errors surface as CodecError"""
        with patch('pipeline.stages.codecs.brotli.compress', side_effect=brotli.error("bad")):
            with pytest.raises(CodecError) as exc_info:
                BrotliCodec().encode(b'abc', BrotliConfig())

        assert exc_info.value.codec == 'brotli'

    def test_ignored_knobs_are_warned(self, caplog):
        """Test explicitly set knobs the binding cannot take are logged at WARNING"""
        with patch('pipeline.stages.codecs.brotli.compress', return_value=b'x'):
            with caplog.at_level(logging.WARNING, logger='pipeline.stages.codecs'):
                BrotliCodec().encode(b'abc', BrotliConfig(enable_context_modeling=False, npostfix=1))

        assert 'disable_literal_context_modeling' in caplog.text
        assert 'npostfix' in caplog.text

    def test_default_knobs_are_quiet(self, caplog):
        """Test defaults produce no warning"""
        with patch('pipeline.stages.codecs.brotli.compress', return_value=b'x'):
            with caplog.at_level(logging.WARNING, logger='pipeline.stages.codecs'):
                BrotliCodec().encode(b'abc', BrotliConfig())

        assert caplog.text == ''


class TestEncode:
    """Test codec dispatch"""

    def test_dispatch_by_kind(self, compressible_bytes):
        """Test encode() picks the adapter matching the codec kind"""
        gz = encode(CodecKind.GZIP, compressible_bytes, GzipConfig(zlib=True))
        br = encode(CodecKind.BROTLI, compressible_bytes, BrotliConfig(quality=1))

        assert gzip.decompress(gz) == compressible_bytes
        assert brotli.decompress(br) == compressible_bytes
