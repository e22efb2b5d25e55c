import hashlib
import io
import unittest

from v4signer import BodyReadError
from v4signer.hashing import CHUNK_SIZE, EMPTY_SHA256, hexdigest, hexhmac, hmac_digest


class RecordingStream(io.BytesIO):
    def __init__(self, data: bytes) -> None:
        super().__init__(data)
        self.read_sizes = []

    def read(self, size=-1):
        self.read_sizes.append(size)
        return super().read(size)


class UnseekableStream(io.RawIOBase):
    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return False

    def read(self, size=-1):
        raise AssertionError('body must not be consumed')


class FailingRewindStream(io.BytesIO):
    def seek(self, *args):
        raise OSError('device gone')


class TestHexdigest(unittest.TestCase):

    def test_empty_values(self) -> None:
        self.assertEqual(hexdigest(None), EMPTY_SHA256)
        self.assertEqual(hexdigest(b''), EMPTY_SHA256)
        self.assertEqual(hexdigest(''), EMPTY_SHA256)

    def test_bytes_and_str(self) -> None:
        self.assertEqual(hexdigest(b'hello'), hashlib.sha256(b'hello').hexdigest())
        self.assertEqual(hexdigest('héllo'), hashlib.sha256('héllo'.encode('utf-8')).hexdigest())

    def test_stream_read_in_chunks_and_rewound(self) -> None:
        data = b'x' * (CHUNK_SIZE * 2 + 10)
        stream = RecordingStream(data)

        self.assertEqual(hexdigest(stream), hashlib.sha256(data).hexdigest())
        self.assertTrue(all(size == CHUNK_SIZE for size in stream.read_sizes))
        self.assertEqual(len(stream.read_sizes), 4)
        self.assertEqual(stream.tell(), 0)
        self.assertEqual(stream.read(), data)

    def test_stream_rewound_to_start_not_previous_position(self) -> None:
        stream = io.BytesIO(b'abcdef')
        stream.seek(3)

        self.assertEqual(hexdigest(stream), hashlib.sha256(b'def').hexdigest())
        self.assertEqual(stream.tell(), 0)

    def test_unseekable_stream_rejected_before_reading(self) -> None:
        with self.assertRaises(BodyReadError):
            hexdigest(UnseekableStream())

    def test_closed_stream(self) -> None:
        stream = io.BytesIO(b'abc')
        stream.close()

        with self.assertRaises(BodyReadError):
            hexdigest(stream)

    def test_failed_rewind_is_an_io_error(self) -> None:
        with self.assertRaises(OSError) as ctx:
            hexdigest(FailingRewindStream(b'abc'))

        self.assertIsInstance(ctx.exception, BodyReadError)
        self.assertIsInstance(ctx.exception.__cause__, OSError)


class TestHmac(unittest.TestCase):

    def test_hmac_digest_is_raw_bytes(self) -> None:
        digest = hmac_digest('key', 'message')

        self.assertIsInstance(digest, bytes)
        self.assertEqual(len(digest), 32)

    def test_hexhmac_matches_hmac_digest(self) -> None:
        self.assertEqual(hexhmac(b'key', 'message'), hmac_digest(b'key', b'message').hex())

    def test_known_value(self) -> None:
        # RFC 4231 test case 2
        self.assertEqual(
            hexhmac('Jefe', 'what do ya want for nothing?'),
            '5bdcc146bf60754e6a042426089575c75a003f089d2739839dec58b964ec3843'
        )


if __name__ == '__main__':
    unittest.main(verbosity=2)
