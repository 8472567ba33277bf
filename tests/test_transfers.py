#
# Copyright (C) 2024 The hgtsim developers
#
# This file is part of hgtsim.
#
# hgtsim is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# hgtsim is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with hgtsim.  If not, see <http://www.gnu.org/licenses/>.
#
"""
Tests for the sampling of transfer events.
"""
import numpy as np
import pytest

import hgtsim
from hgtsim import transfers
from tests import FixedRng
from tests import random_tree

EXAMPLE_CDF = [0, 2 / 9, 5 / 9, 7 / 9, 1]


class TestMakeCdf:
    def test_example(self, example_model_fixture):
        cdf = example_model_fixture.sampler.cdf
        assert cdf == pytest.approx(EXAMPLE_CDF)
        assert cdf[-1] == 1

    def test_monotone(self):
        model = hgtsim.SpeciesTreeModel(random_tree(40, 5))
        assert np.all(np.diff(model.sampler.cdf) >= 0)
        assert model.sampler.cdf[0] == 0
        assert model.sampler.cdf[-1] == pytest.approx(1)

    def test_read_only(self, example_model_fixture):
        with pytest.raises(ValueError):
            example_model_fixture.sampler.cdf[0] = 1

    def test_zero_weight(self):
        with pytest.raises(hgtsim.DegenerateTimelineError):
            transfers.make_cdf([0, 0, 0], [0, 2, 2])
        with pytest.raises(hgtsim.DegenerateTimelineError):
            transfers.make_cdf([0, 1, 1], [0, 0, 0])

    def test_empty(self):
        with pytest.raises(hgtsim.DegenerateTimelineError):
            transfers.make_cdf([], [])

    def test_single_leaf_tree(self):
        with pytest.raises(hgtsim.DegenerateTimelineError):
            hgtsim.SpeciesTreeModel.from_newick("A:1;")

    def test_zero_length_tree(self):
        with pytest.raises(hgtsim.DegenerateTimelineError):
            hgtsim.SpeciesTreeModel.from_newick("((A,B)C,D)R;")


class TestChooseFromCdf:
    bp = np.array([0, 1, 2, 3, 5], dtype=float)
    cdf = np.array(EXAMPLE_CDF)

    def test_middle(self):
        time, index = transfers.choose_from_cdf(self.cdf, self.bp, FixedRng([0.5]))
        assert index == 2
        assert time == pytest.approx(1 + 2.5 / 3)

    def test_zero(self):
        time, index = transfers.choose_from_cdf(self.cdf, self.bp, FixedRng([0.0]))
        assert index == 1
        assert time == 0

    def test_on_cdf_value(self):
        # r equal to an entry of the CDF falls into the next interval
        time, index = transfers.choose_from_cdf(self.cdf, self.bp, FixedRng([5 / 9]))
        assert index == 3
        assert time == pytest.approx(2)

    def test_last_interval(self):
        time, index = transfers.choose_from_cdf(self.cdf, self.bp, FixedRng([0.9]))
        assert index == 4
        assert time == pytest.approx(3 + (0.9 - 7 / 9) / (2 / 9) * 2)

    def test_zero_weight_interval_skipped(self):
        cdf = np.array([0, 0.5, 0.5, 1])
        bp = np.array([0, 1, 2, 3], dtype=float)
        _, index = transfers.choose_from_cdf(cdf, bp, FixedRng([0.5]))
        assert index == 3

    def test_beyond_cdf(self):
        cdf = np.array([0, 0.5, 0.9])
        bp = np.array([0, 1, 2], dtype=float)
        with pytest.raises(hgtsim.SamplingError):
            transfers.choose_from_cdf(cdf, bp, FixedRng([0.95]))

    @pytest.mark.parametrize("seed", range(1, 4))
    def test_time_within_interval(self, seed):
        rng = np.random.default_rng(seed)
        for _ in range(100):
            time, index = transfers.choose_from_cdf(self.cdf, self.bp, rng)
            assert self.bp[index - 1] <= time <= self.bp[index]


class TestRandomPair:
    def test_too_few(self):
        assert transfers.random_pair([], FixedRng()) is None
        assert transfers.random_pair([4], FixedRng()) is None

    def test_collision_redrawn(self):
        rng = FixedRng(integers=[1, 1, 1, 0])
        assert transfers.random_pair([5, 6, 7], rng) == (6, 5)
        assert rng.integer_values == []

    def test_order(self):
        assert transfers.random_pair([5, 6], FixedRng(integers=[1, 0])) == (6, 5)
        assert transfers.random_pair([5, 6], FixedRng(integers=[0, 1])) == (5, 6)

    def test_distinct(self):
        rng = np.random.default_rng(42)
        for _ in range(100):
            first, second = transfers.random_pair((1, 2, 3), rng)
            assert first != second
            assert isinstance(first, int)


class TestTransferSampler:
    def test_sample_event(self, example_model_fixture):
        rng = FixedRng([0.5], [0, 0, 2])
        event = example_model_fixture.sampler.sample_event(rng)
        assert event.donor == 2
        assert event.recipient == 4
        assert event.time == pytest.approx(1 + 2.5 / 3)

    def test_sample_event_single_lineage(self, example_model_fixture):
        assert example_model_fixture.sampler.sample_event(FixedRng([0.9])) is None

    def test_sample_zero(self, example_model_fixture):
        assert example_model_fixture.sampler.sample(0, FixedRng()) == []

    @pytest.mark.parametrize("num_transfers", [-1, 1.5, "2", None])
    def test_sample_bad_count(self, example_model_fixture, num_transfers):
        with pytest.raises(ValueError):
            example_model_fixture.sampler.sample(num_transfers, FixedRng())

    def test_sorted_by_time(self, example_model_fixture):
        rng = FixedRng([0.7, 0.3, 0.9, 0.1], [0, 1, 1, 0, 0, 1])
        events = example_model_fixture.sampler.sample(4, rng)
        assert len(events) == 3
        assert [e.time for e in events] == sorted(e.time for e in events)
        assert events[0].time == pytest.approx(0.45)

    def test_dropped_fraction(self, example_model_fixture):
        rng = np.random.default_rng(1234)
        events = example_model_fixture.sampler.sample(9000, rng)
        # Draws in the last interval, where only D is alive, are dropped
        assert abs(len(events) - 7000) < 250

    @pytest.mark.parametrize("seed", range(1, 6))
    def test_events_between_contemporaries(self, seed):
        model = hgtsim.SpeciesTreeModel(random_tree(25, seed))
        rng = np.random.default_rng(seed)
        for event in model.sampler.sample(200, rng):
            assert event.donor != event.recipient
            for j in [event.donor, event.recipient]:
                node = model.tree[j]
                assert node.depth - node.length <= event.time + 1e-9
                assert event.time <= node.depth + 1e-9

    def test_reproducible(self, example_model_fixture):
        sampler = example_model_fixture.sampler
        a = sampler.sample(50, np.random.default_rng(5))
        b = sampler.sample(50, np.random.default_rng(5))
        assert a == b

    def test_str(self, example_model_fixture):
        lines = str(example_model_fixture.sampler).splitlines()
        assert lines[0] == "Transfer time distribution"
        assert "cdf" in lines[2]
        assert "1.000000" in lines[-2]


class TestTransferEvent:
    def test_asdict(self):
        event = hgtsim.TransferEvent(donor=1, recipient=2, time=0.5)
        assert event.asdict() == {"donor": 1, "recipient": 2, "time": 0.5}

    def test_frozen(self):
        event = hgtsim.TransferEvent(donor=1, recipient=2, time=0.5)
        with pytest.raises(AttributeError):
            event.time = 1
