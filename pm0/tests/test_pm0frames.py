#!/usr/bin/env python3

import unittest

from pm0fault import StackOverflow, StackUnderflow
from pm0frames import FrameManager, ADDRESS_BIAS
from pm0memory import OperandStack

class TestFrameManager(unittest.TestCase):
    def setUp(self):
        self.frames = FrameManager(OperandStack(64), code_length=20)

    def test_initial_state(self):
        self.assertEqual(self.frames.bp, 1)
        self.assertEqual(self.frames.sp, 0)
        self.assertEqual(self.frames.frames(), [1])

    def test_resolve_outermost(self):
        self.frames.reserve(10)
        for offset in range(ADDRESS_BIAS, 11):
            self.assertEqual(self.frames.resolve(0, offset), self.frames.bp + offset - ADDRESS_BIAS)

    def test_resolve_outermost_after_calls(self):
        self.frames.reserve(6)
        self.frames.call(0, 5)
        self.frames.reserve(4)
        self.frames.call(1, 9)
        self.frames.ret()
        self.frames.ret()
        self.assertEqual(self.frames.resolve(0, 4), 4)
        self.assertEqual(self.frames.resolve(0, 6), 6)

    def test_resolve_above_sp(self):
        self.frames.reserve(4)
        self.assertRaises(StackUnderflow, self.frames.resolve, 0, 6)

    def test_resolve_below_zero(self):
        self.frames.reserve(4)
        self.assertRaises(StackUnderflow, self.frames.resolve, 0, -1)

    def test_call_writes_header(self):
        self.frames.reserve(5)
        self.frames.call(0, 7)
        self.assertEqual(self.frames.bp, 6)
        self.assertEqual(self.frames.sp, 5)
        stack = self.frames.stack
        self.assertEqual([stack.read(i) for i in range(5, 9)], [0, 1, 1, 7])

    def test_call_then_return_restores(self):
        self.frames.reserve(5)
        self.frames.call(0, 7)
        pc = self.frames.ret()
        self.assertEqual(pc, 7)
        self.assertEqual(self.frames.bp, 1)
        self.assertEqual(self.frames.sp, 5)
        self.assertEqual(self.frames.depth, 0)

    def test_return_after_locals_reserved(self):
        self.frames.reserve(5)
        self.frames.call(0, 3)
        self.frames.reserve(6)
        self.assertEqual(self.frames.ret(), 3)
        self.assertEqual(self.frames.sp, 5)

    def test_outer_variable_through_static_link(self):
        self.frames.reserve(6)
        self.frames.store(0, 4, 42)
        self.frames.call(0, 7)
        self.frames.reserve(5)
        self.assertEqual(self.frames.load(1, 4), 42)
        self.frames.store(1, 5, 8)
        self.assertEqual(self.frames.stack.read(5), 8)
        self.assertEqual(self.frames.resolve(0, 4), self.frames.bp + 3)

    def test_static_link_skips_dynamic_callers(self):
        # main -> a (level 0) -> b (level 1): b's enclosing scope is main
        self.frames.reserve(5)
        self.frames.call(0, 1)
        a = self.frames.bp
        self.frames.reserve(5)
        self.frames.call(1, 2)
        self.frames.reserve(5)
        self.assertEqual(self.frames.frames(), [self.frames.bp, a, 1])
        self.assertEqual(self.frames.base(1), 1)
        self.assertRaises(StackUnderflow, self.frames.base, 2)

    def test_chase_past_outermost(self):
        self.frames.reserve(5)
        self.assertRaises(StackUnderflow, self.frames.base, 1)
        self.frames.call(0, 1)
        self.frames.reserve(4)
        self.assertEqual(self.frames.base(1), 1)
        self.assertRaises(StackUnderflow, self.frames.base, 2)
        self.assertRaises(StackUnderflow, self.frames.load, 3, 4)

    def test_negative_level(self):
        self.assertRaises(StackUnderflow, self.frames.base, -1)

    def test_corrupted_static_link(self):
        self.frames.reserve(5)
        self.frames.call(0, 1)
        self.frames.reserve(4)
        self.frames.store(0, 1, 999)
        self.assertRaises(StackUnderflow, self.frames.base, 1)

    def test_chain_stops_at_corrupted_dynamic_link(self):
        self.frames.reserve(5)
        self.frames.call(0, 1)
        a = self.frames.bp
        self.frames.reserve(4)
        self.frames.call(0, 2)
        self.frames.reserve(4)
        self.assertEqual(self.frames.chain(), self.frames.frames())
        self.frames.store(0, 2, self.frames.stack.capacity - 1)
        self.assertEqual(self.frames.chain(), [self.frames.bp])
        self.assertRaises(StackOverflow, self.frames.frames)
        self.frames.store(0, 2, a)
        self.assertEqual(self.frames.chain(), [self.frames.bp, a, 1])

    def test_unreserved_frame(self):
        self.frames.reserve(5)
        self.frames.call(0, 1)
        self.assertRaises(StackUnderflow, self.frames.load, 0, 4)
        self.assertRaises(StackUnderflow, self.frames.store, 0, 4, 1)

    def test_return_without_call(self):
        self.frames.reserve(5)
        self.assertRaises(StackUnderflow, self.frames.ret)
        self.assertEqual(self.frames.bp, 1)
        self.assertEqual(self.frames.sp, 5)

    def test_return_address_out_of_range(self):
        self.frames.reserve(5)
        self.frames.call(0, 21)
        self.assertRaises(StackUnderflow, self.frames.ret)
        self.assertEqual(self.frames.bp, 6)

    def test_return_to_end_of_program(self):
        self.frames.reserve(5)
        self.frames.call(0, 20)
        self.assertEqual(self.frames.ret(), 20)

    def test_call_overflow(self):
        frames = FrameManager(OperandStack(8), code_length=4)
        frames.reserve(5)
        self.assertRaises(StackOverflow, frames.call, 0, 1)
        self.assertEqual(frames.bp, 1)
        self.assertEqual(frames.depth, 0)

    def test_reserve_bounds(self):
        frames = FrameManager(OperandStack(8), code_length=4)
        self.assertRaises(StackOverflow, frames.reserve, 8)
        frames.reserve(7)
        self.assertEqual(frames.sp, 7)
        self.assertRaises(StackUnderflow, frames.reserve, -8)
        frames.reserve(-7)
        self.assertEqual(frames.sp, 0)

    def test_live(self):
        self.frames.reserve(3)
        self.frames.store(0, 3, 4)
        self.assertEqual(self.frames.live(), (0, 0, 0, 4))

if __name__ == '__main__':
    unittest.main()
