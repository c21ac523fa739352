import unittest
from unittest.mock import patch

from botocore.exceptions import ClientError

from photoboard.errors import MediaRelayError
from photoboard.media import InMemoryMediaRelay, S3MediaRelay


class InMemoryMediaRelayTests(unittest.TestCase):
    def test_upload_stores_bytes(self):
        relay = InMemoryMediaRelay()
        url = relay.upload(b"abc", filename="Cat.JPG", content_type="image/jpeg")
        self.assertTrue(url.startswith("https://media.example.test/photos/"))
        self.assertTrue(url.endswith(".jpg"))
        key = url.removeprefix("https://media.example.test/")
        self.assertEqual(relay.stored_objects[key], b"abc")

    def test_extension_from_content_type(self):
        relay = InMemoryMediaRelay(key_prefix="")
        url = relay.upload(b"abc", filename=None, content_type="image/png")
        self.assertTrue(url.endswith(".png"))
        self.assertNotIn("/photos/", url)

    def test_failure_mode(self):
        relay = InMemoryMediaRelay(fail_uploads=True)
        with self.assertRaises(MediaRelayError):
            relay.upload(b"abc")
        self.assertEqual(relay.stored_objects, {})


class S3MediaRelayTests(unittest.TestCase):
    @patch("photoboard.media.boto3.client")
    def test_upload_puts_object_and_returns_public_url(self, mock_client_factory):
        client = mock_client_factory.return_value
        relay = S3MediaRelay(
            bucket="photos-bucket",
            region="eu-west-1",
            public_base_url="https://cdn.example.com/",
        )
        url = relay.upload(b"data", filename="dog.png", content_type="image/png")

        client.put_object.assert_called_once()
        kwargs = client.put_object.call_args.kwargs
        self.assertEqual(kwargs["Bucket"], "photos-bucket")
        self.assertEqual(kwargs["Body"], b"data")
        self.assertEqual(kwargs["ContentType"], "image/png")
        self.assertTrue(kwargs["Key"].startswith("photos/"))
        self.assertEqual(url, f"https://cdn.example.com/{kwargs['Key']}")

    @patch("photoboard.media.boto3.client")
    def test_public_url_fallbacks(self, _mock_client_factory):
        with_endpoint = S3MediaRelay(bucket="b", endpoint="https://s3.local:9000/")
        self.assertEqual(with_endpoint.public_url("k.png"), "https://s3.local:9000/b/k.png")

        aws = S3MediaRelay(bucket="b", region="us-west-2")
        self.assertEqual(aws.public_url("k.png"), "https://b.s3.us-west-2.amazonaws.com/k.png")

    @patch("photoboard.media.boto3.client")
    def test_client_error_becomes_relay_error(self, mock_client_factory):
        mock_client_factory.return_value.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
        )
        relay = S3MediaRelay(bucket="b")
        with self.assertRaises(MediaRelayError):
            relay.upload(b"data", filename="x.png")


if __name__ == "__main__":
    unittest.main()
