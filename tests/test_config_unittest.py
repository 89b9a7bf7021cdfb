import os
import unittest
from unittest import mock

from image_converter.config import DEFAULT_PORT, MAX_FILE_SIZE, Settings


class TestSettings(unittest.TestCase):
    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = Settings.from_env()
        self.assertEqual(settings.port, DEFAULT_PORT)
        self.assertEqual(settings.host, "0.0.0.0")
        self.assertEqual(settings.max_file_size, 10 * 1024 * 1024)
        self.assertEqual(settings.field_name, "image")
        self.assertEqual(settings.log_level, "INFO")

    def test_port_and_log_level_from_environment(self):
        with mock.patch.dict(os.environ, {"PORT": "8081", "LOG_LEVEL": "debug"}):
            settings = Settings.from_env()
        self.assertEqual(settings.port, 8081)
        self.assertEqual(settings.log_level, "DEBUG")
        self.assertEqual(settings.max_file_size, MAX_FILE_SIZE)

    def test_invalid_port_falls_back_to_default(self):
        with mock.patch.dict(os.environ, {"PORT": "not-a-port"}):
            self.assertEqual(Settings.from_env().port, DEFAULT_PORT)


if __name__ == "__main__":
    unittest.main()
