"""Tests for CacheEntry, PhotoDescriptor and scale factors."""

import pytest
from photoprep.photo_record import (
    CacheEntry, PhotoDescriptor, display_name, js_round, scale_factors
)


class TestScaleFactors:
    """Tests for the scale-factor rule."""

    def test_near_square_is_one_by_one(self):
        """Test aspect difference under 120 gives 1x1."""
        assert scale_factors(800, 850) == (1, 1)

    def test_landscape(self):
        """Test wide photo scales by dimension / 120."""
        assert scale_factors(1000, 400) == (8, 3)

    def test_portrait(self):
        """Test tall photo scales by dimension / 120."""
        assert scale_factors(400, 1000) == (3, 8)

    def test_boundary_is_scaled(self):
        """Test a difference of exactly 120 is scaled."""
        assert scale_factors(240, 360) == (2, 3)

    def test_rounds_half_up(self):
        """Test 300 / 120 = 2.5 rounds up to 3."""
        assert scale_factors(300, 1000) == (3, 8)

    def test_js_round(self):
        """Test half-up rounding."""
        assert js_round(2.5) == 3
        assert js_round(3.5) == 4
        assert js_round(2.49) == 2


class TestCacheEntry:
    """Tests for CacheEntry class."""

    def test_from_result(self):
        """Test building an entry from a hash result."""
        entry = CacheEntry.from_result('beach.day.jpg', 1000, 400, 'abc')

        assert entry.name == 'beach.day'
        assert entry.width_scale == 8
        assert entry.height_scale == 3
        assert entry.hash == 'abc'

    def test_to_dict_uses_camel_case(self, sample_cache_entry):
        """Test serialized keys match the cache file format."""
        data = sample_cache_entry.to_dict()

        assert data == {
            'name': 'sunset',
            'width': 1000,
            'height': 400,
            'widthScale': 8,
            'heightScale': 3,
            'hash': sample_cache_entry.hash,
        }

    def test_from_dict(self, sample_cache_entry):
        """Test parsing a cache file entry."""
        assert CacheEntry.from_dict(sample_cache_entry.to_dict()) == sample_cache_entry

    def test_from_dict_missing_field(self):
        """Test a missing field raises KeyError."""
        with pytest.raises(KeyError):
            CacheEntry.from_dict({'name': 'x', 'width': 1})


class TestPhotoDescriptor:
    """Tests for PhotoDescriptor class."""

    def test_from_cache_entry(self, sample_cache_entry):
        """Test descriptor fields come from the entry and prefix."""
        descriptor = PhotoDescriptor.from_cache_entry(
            'sunset.jpg', sample_cache_entry, 'https://cdn.example.com/'
        )

        assert descriptor.src == 'https://cdn.example.com/sunset.jpg'
        assert descriptor.title == 'sunset'
        assert descriptor.alt == 'sunset'
        assert descriptor.width == 8
        assert descriptor.height == 3

    def test_to_dict(self, sample_cache_entry):
        """Test manifest entry layout."""
        descriptor = PhotoDescriptor.from_cache_entry('sunset.jpg', sample_cache_entry, './photos/')

        data = descriptor.to_dict()

        assert list(data.keys()) == ['src', 'title', 'alt', 'width', 'height', 'size', 'hash']
        assert data['size'] == {'height': 400, 'width': 1000}
        assert data['src'] == './photos/sunset.jpg'

    def test_is_immutable(self, sample_cache_entry):
        """Test descriptors cannot be modified."""
        descriptor = PhotoDescriptor.from_cache_entry('sunset.jpg', sample_cache_entry, '')

        with pytest.raises(AttributeError):
            descriptor.src = 'other'


def test_display_name():
    """Test only the final extension is stripped."""
    assert display_name('a.b.jpg') == 'a.b'
    assert display_name('noext') == 'noext'
