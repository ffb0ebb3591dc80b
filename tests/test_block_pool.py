import unittest

from block_allocation import BlockPool


class BlockPoolTests(unittest.TestCase):
    def test_copies_capacities(self) -> None:
        capacities = [10, 0, 25]
        pool = BlockPool(capacities)
        pool.assign(2, 5)
        self.assertEqual(capacities, [10, 0, 25])
        self.assertEqual(pool.capacities(), (10, 0, 25))
        self.assertEqual(pool.remaining(), (10, 0, 20))

    def test_candidates_in_index_order(self) -> None:
        pool = BlockPool([30, 5, 40, 10])
        self.assertEqual([block.index for block in pool.candidates(10)], [0, 2, 3])
        self.assertEqual([block.index for block in pool.candidates(0)], [0, 1, 2, 3])

    def test_assign_refuses_overflow(self) -> None:
        pool = BlockPool([10])
        with self.assertRaises(ValueError):
            pool.assign(0, 11)
        self.assertEqual(pool.remaining(), (10,))


if __name__ == "__main__":
    unittest.main()
