#!/usr/bin/env python3
"""
Tests for the genus table behind Kobbelt's exact summation.
"""

import numpy as np
import pytest

from sumbench.genus import GenusTable
from sumbench.precision import Precision, to_fraction


def table_total(table):
    return sum((to_fraction(value) for _, value in table), 0)


class TestGenusTable:
    """Test cases for GenusTable insertion."""

    def test_empty(self, precision):
        table = GenusTable(precision)
        assert len(table) == 0
        assert table.merges == 0
        result = table.drain()
        assert result == 0
        assert isinstance(result, precision.dtype)

    def test_single_value(self):
        table = GenusTable(Precision.SINGLE)
        table.insert(np.float32(1.5))
        assert len(table) == 1
        assert Precision.SINGLE.genus(np.float32(1.5)) in table

    def test_same_genus_merges(self):
        table = GenusTable(Precision.SINGLE)
        table.insert(np.float32(1.0))
        table.insert(np.float32(1.0))

        assert table.merges == 1
        assert list(table) == [(256, np.float32(2.0))]

    def test_merge_cascades(self):
        table = GenusTable(Precision.SINGLE)
        table.insert(np.float32(2.0))
        table.insert(np.float32(1.0))
        table.insert(np.float32(1.0))

        # 1 + 1 lands on the genus of 2, which merges again into 4
        assert table.merges == 2
        assert list(table) == [(258, np.float32(4.0))]

    def test_complementary_genus_opposite_sign_merges(self):
        table = GenusTable(Precision.SINGLE)
        table.insert(np.float32(1.0))
        table.insert(np.float32(-(1 + 2.0 ** -23)))

        assert table.merges == 1
        assert len(table) == 1
        (_, value), = list(table)
        assert value == np.float32(-(2.0 ** -23))

    def test_complementary_genus_same_sign_kept(self):
        table = GenusTable(Precision.SINGLE)
        table.insert(np.float32(1.0))
        table.insert(np.float32(1 + 2.0 ** -23))

        assert table.merges == 0
        assert [genus for genus, _ in table] == [254, 255]

    def test_opposite_values_cancel(self, precision):
        dtype = precision.dtype
        table = GenusTable(precision)
        table.insert(dtype(3))
        table.insert(dtype(-3))

        assert len(table) == 1
        assert table.drain() == 0

    def test_iteration_ascending(self):
        table = GenusTable(Precision.DOUBLE)
        for value in [1024.0, 1.0, 3.0, 0.25]:
            table.insert(np.float64(value))
        genera = [genus for genus, _ in table]
        assert genera == sorted(genera)

    def test_random_total_preserved(self, precision, make_generator):
        generator = make_generator(precision, seed=17)
        table = GenusTable(precision)
        inserted = 0
        for _ in range(300):
            value = generator.value()
            inserted += to_fraction(value)
            table.insert(value)
            assert table_total(table) == inserted

        for genus, value in table:
            assert precision.genus(value) == genus
        assert table.merges > 0

    def test_random_cancelling_pairs(self, ieee_precision, make_generator):
        generator = make_generator(ieee_precision, seed=23)
        values = [generator.value() for _ in range(50)]
        table = GenusTable(ieee_precision)
        for value in values + [-v for v in values]:
            table.insert(value)
        assert table_total(table) == 0
        assert len(table) < len(values)


class TestDrain:
    """Test cases for draining a table."""

    def test_drain_sums_in_genus_order(self):
        table = GenusTable(Precision.SINGLE)
        values = [np.float32(2.0 ** 30), np.float32(1.0), np.float32(-(2.0 ** 30))]
        for value in values:
            table.insert(value)

        expected = np.float32(0)
        for _, value in table:
            expected = expected + value
        assert table.drain() == expected

    def test_drain_recovers_small_term(self):
        table = GenusTable(Precision.SINGLE)
        for value in [1e8, 1.0, -1e8]:
            table.insert(np.float32(value))
        assert table.drain() == np.float32(1.0)

    @pytest.mark.parametrize("target", [Precision.DOUBLE, Precision.EXTENDED])
    def test_drain_other_precision(self, target):
        table = GenusTable(Precision.SINGLE)
        table.insert(np.float32(1.5))
        table.insert(np.float32(2.0 ** -20))
        result = table.drain(target)
        assert isinstance(result, target.dtype)
        assert result == 1.5 + 2.0 ** -20
