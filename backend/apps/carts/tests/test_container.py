import threading
import time
import unittest
from unittest.mock import patch

from apps.carts import container


class GetCartServiceTests(unittest.TestCase):
    def test_concurrent_first_calls_share_one_service(self):
        built = []

        def slow_build():
            built.append(object())
            time.sleep(0.05)
            return built[-1]

        start = threading.Barrier(6)
        results = []

        def worker():
            start.wait(timeout=5)
            results.append(container.get_cart_service())

        with patch.object(container, "_service", None), patch.object(
            container, "build_cart_service", side_effect=slow_build
        ):
            threads = [threading.Thread(target=worker) for _ in range(6)]
            for t in threads:
                t.start()
            for t in threads:
                t.join(timeout=5)

        self.assertEqual(len(built), 1)
        self.assertEqual(len(results), 6)
        self.assertTrue(all(r is built[0] for r in results))

    def test_build_wires_replay_ttl_from_settings(self):
        service = container.build_cart_service(client=object())
        self.assertEqual(service.replay.ttl_ms, 5000)
