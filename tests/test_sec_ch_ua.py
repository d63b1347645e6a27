import random
import re

import pytest

from holytls.sec_ch_ua import (
    ALTERNATE_GREASE_VERSION,
    GREASE_CHARS,
    PRIMARY_GREASE_VERSION,
    SecChUaGenerator,
    generate_sec_ch_ua,
    get_mobile,
)

_ENTRY = re.compile(r'"([^"]*)";v="([^"]*)"')


def _brands(value):
    return _ENTRY.findall(value)


def _check_brand(brand):
    assert len(brand) == 11
    assert brand.startswith("Not")
    assert brand[4] == "A"
    assert brand.endswith("Brand")
    assert brand[3] in GREASE_CHARS
    assert brand[5] in GREASE_CHARS


def test_get_mobile_values():
    assert get_mobile(True) == "?1"
    assert get_mobile(False) == "?0"


@pytest.mark.parametrize("seed", range(20))
def test_structure_of_generated_value(seed):
    gen = SecChUaGenerator(143, rng=random.Random(seed))
    value = gen.get()
    brands = _brands(value)
    assert len(brands) == 3
    assert ", ".join(f'"{b}";v="{v}"' for b, v in brands) == value
    as_dict = dict(brands)
    assert as_dict["Chromium"] == "143"
    assert as_dict["Google Chrome"] == "143"
    assert as_dict[gen.grease_brand] == str(gen.grease_version)
    _check_brand(gen.grease_brand)
    assert gen.grease_version in (PRIMARY_GREASE_VERSION, ALTERNATE_GREASE_VERSION)
    assert sorted(gen.brand_order) == [0, 1, 2]


def test_value_is_stable_per_instance():
    gen = SecChUaGenerator(131)
    first = gen.get()
    assert '"Chromium";v="131"' in first
    assert '"Google Chrome";v="131"' in first
    assert gen.get() == first
    assert gen.get() == first


def test_same_seed_gives_same_value():
    a = SecChUaGenerator(120, rng=random.Random(7))
    b = SecChUaGenerator(120, rng=random.Random(7))
    assert a.get() == b.get()
    assert a.grease_brand == b.grease_brand


def test_full_version_list_keeps_order_and_brand():
    gen = SecChUaGenerator(143, rng=random.Random(3))
    full = gen.full_version_list("143.0.7499.192")
    short_names = [b for b, _ in _brands(gen.get())]
    full_brands = _brands(full)
    assert [b for b, _ in full_brands] == short_names
    as_dict = dict(full_brands)
    assert as_dict["Chromium"] == "143.0.7499.192"
    assert as_dict["Google Chrome"] == "143.0.7499.192"
    assert as_dict[gen.grease_brand] == str(gen.grease_version)


def test_both_grease_versions_occur():
    versions = {
        SecChUaGenerator(143, rng=random.Random(seed)).grease_version
        for seed in range(200)
    }
    assert versions == {PRIMARY_GREASE_VERSION, ALTERNATE_GREASE_VERSION}


def test_generate_sec_ch_ua_uses_major_version():
    value = generate_sec_ch_ua(125)
    as_dict = dict(_brands(value))
    assert as_dict["Chromium"] == "125"
    assert as_dict["Google Chrome"] == "125"
    assert len(as_dict) == 3