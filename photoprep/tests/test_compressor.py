"""Tests for Compressor class."""

from PIL import Image
import pytest

from photoprep.compressor import CompressionError, Compressor


class TestCompressor:
    """Tests for Compressor class."""

    def test_init_defaults(self):
        """Test default quality."""
        assert Compressor().quality == 80

    def test_get_output_format(self):
        """Test extension mapping is case-insensitive."""
        compressor = Compressor()

        assert compressor.get_output_format('a.jpg') == 'JPEG'
        assert compressor.get_output_format('a.JPEG') == 'JPEG'
        assert compressor.get_output_format('a.png') == 'PNG'
        assert compressor.get_output_format('a.gif') is None

    def test_compress_jpeg_and_png(self, gallery_dirs, make_image, logger):
        """Test supported photos are re-encoded into the destination."""
        source, published = gallery_dirs
        make_image(source / 'a.jpg', size=(64, 48))
        make_image(source / 'b.png', size=(20, 20), color='blue')

        result = Compressor(logger=logger).compress_all(['a.jpg', 'b.png'], str(source), str(published))

        assert result.written == ['a.jpg', 'b.png']
        assert result.skipped == []
        with Image.open(published / 'a.jpg') as img:
            assert img.format == 'JPEG'
            assert img.size == (64, 48)
        with Image.open(published / 'b.png') as img:
            assert img.format == 'PNG'

    def test_compress_rgba_png_named_jpg(self, gallery_dirs, logger):
        """Test transparent images are flattened for JPEG output."""
        source, published = gallery_dirs
        Image.new('RGBA', (10, 10), (255, 0, 0, 128)).save(source / 'alpha.jpg', format='PNG')

        Compressor(logger=logger).compress_all(['alpha.jpg'], str(source), str(published))

        with Image.open(published / 'alpha.jpg') as img:
            assert img.mode == 'RGB'

    @pytest.mark.parametrize('mode,expected', [
        ('RGBA', 'RGB'), ('LA', 'RGB'), ('P', 'RGB'), ('CMYK', 'RGB'), ('L', 'L'), ('RGB', 'RGB'),
    ])
    def test_convert_color_mode(self, mode, expected):
        """Test every mode ends up storable as JPEG."""
        img = Image.new(mode, (4, 4))

        assert Compressor()._convert_color_mode(img).mode == expected

    def test_convert_color_mode_flattens_onto_white(self):
        """Test fully transparent pixels become white."""
        img = Image.new('RGBA', (2, 2), (0, 0, 0, 0))

        assert Compressor()._convert_color_mode(img).getpixel((0, 0)) == (255, 255, 255)

    def test_unsupported_extension_is_skipped(self, gallery_dirs, make_image, logger, caplog):
        """Test other formats are not copied."""
        source, published = gallery_dirs
        make_image(source / 'anim.gif', format='GIF')

        result = Compressor(logger=logger).compress_all(['anim.gif'], str(source), str(published))

        assert result.skipped == ['anim.gif']
        assert not (published / 'anim.gif').exists()
        assert 'Skipping anim.gif' in caplog.text

    def test_failure_aborts_step(self, gallery_dirs, make_image, logger):
        """Test one failing photo aborts the whole step."""
        source, published = gallery_dirs
        (source / 'broken.jpg').write_bytes(b'not an image')
        make_image(source / 'later.jpg')

        with pytest.raises(CompressionError) as excinfo:
            Compressor(logger=logger).compress_all(['broken.jpg', 'later.jpg'], str(source), str(published))

        assert excinfo.value.filename == 'broken.jpg'
        assert not (published / 'later.jpg').exists()
