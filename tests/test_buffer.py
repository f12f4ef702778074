"""Tests for the fixed-capacity sample buffer."""

from numpy.testing import assert_allclose

from arsmooth.filters.buffer import SampleBuffer
from tests.conftest import make_pose


class TestSampleBuffer:

    def test_empty_average_is_none(self):
        buffer = SampleBuffer(5)
        assert len(buffer) == 0
        assert buffer.average() is None

    def test_evicts_oldest_past_capacity(self):
        buffer = SampleBuffer(5)
        for i in range(7):
            buffer.push(make_pose(float(i)))

        assert len(buffer) == 5
        assert [p.position[0] for p in buffer.samples()] == [2.0, 3.0, 4.0, 5.0, 6.0]

    def test_average_is_component_wise(self):
        buffer = SampleBuffer(4)
        buffer.push(make_pose(0.0, 2.0, rotation=(0.2, 0.0, 0.0), scale=(1.0, 1.0, 1.0)))
        buffer.push(make_pose(1.0, 4.0, rotation=(0.4, 0.0, 0.0), scale=(3.0, 3.0, 3.0)))

        average = buffer.average()

        assert_allclose(average.position, [0.5, 3.0, 0.0])
        assert_allclose(average.rotation, [0.3, 0.0, 0.0])
        assert_allclose(average.scale, [2.0, 2.0, 2.0])

    def test_average_after_wraparound(self):
        buffer = SampleBuffer(3)
        for i in range(10):
            buffer.push(make_pose(float(i)))
        assert_allclose(buffer.average().position, [8.0, 0.0, 0.0])

    def test_clear(self):
        buffer = SampleBuffer(3)
        buffer.push(make_pose(1.0))
        buffer.clear()
        assert len(buffer) == 0
        assert buffer.average() is None

    def test_shrink_keeps_newest(self):
        buffer = SampleBuffer(5)
        for i in range(5):
            buffer.push(make_pose(float(i)))

        buffer.resize(3)

        assert buffer.capacity == 3
        assert [p.position[0] for p in buffer.samples()] == [2.0, 3.0, 4.0]

    def test_grow_keeps_everything(self):
        buffer = SampleBuffer(3)
        for i in range(4):
            buffer.push(make_pose(float(i)))

        buffer.resize(8)
        buffer.push(make_pose(9.0))

        assert buffer.capacity == 8
        assert [p.position[0] for p in buffer.samples()] == [1.0, 2.0, 3.0, 9.0]

    def test_capacity_is_at_least_one(self):
        buffer = SampleBuffer(0)
        buffer.push(make_pose(1.0))
        buffer.push(make_pose(2.0))
        assert buffer.capacity == 1
        assert len(buffer) == 1
        assert buffer.average().position[0] == 2.0
