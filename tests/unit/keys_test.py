from ddt import ddt, data, unpack
from unittest import TestCase

import requests

from condhttp.errors import MissingRequestContext
from condhttp.keys import key_from_request, key_from_response, normalize_url, remove_dot_segments
from condhttp.model import Method, RequestKey

from http_fakes import build_response, prepared


@ddt
class TestRemoveDotSegments(TestCase):
    @data(
        ('/a/b/c/./../../g', '/a/g'),
        ('mid/content=5/../6', 'mid/6'),
        ('/a/./b/', '/a/b/'),
        ('/a/..', '/'),
        ('/..', '/'),
        ('/a/.', '/a/'),
        ('/', '/'),
        ('', ''),
    )
    @unpack
    def test_remove_dot_segments(self, path, expected):
        self.assertEqual(expected, remove_dot_segments(path))


@ddt
class TestNormalizeUrl(TestCase):
    @data(
        # Scheme and host are case-insensitive, the fragment is not part of the request.
        ('HTTP://Example.COM/a/./b/../c?x=1#frag', None, 'http://example.com/a/c?x=1'),
        # An empty path is the root.
        ('http://example.com', None, 'http://example.com/'),
        # The query string is kept verbatim, including its case.
        ('http://example.com/feed?Tag=A&limit=5', None, 'http://example.com/feed?Tag=A&limit=5'),
        # Relative references resolve against the target.
        ('/feed?x=1', 'http://example.com/other', 'http://example.com/feed?x=1'),
        ('feed', 'http://example.com/dir/page', 'http://example.com/dir/feed'),
        # An absolute URL ignores the target.
        ('http://example.org/feed', 'http://example.com/', 'http://example.org/feed'),
    )
    @unpack
    def test_normalize_url(self, url, base, expected):
        self.assertEqual(expected, normalize_url(url, base))


@ddt
class TestKeys(TestCase):
    def test_method_may_be_given_by_name(self):
        self.assertEqual(key_from_request(Method.GET, 'http://example.com/'),
                         key_from_request('GET', 'http://example.com/'))

    def test_unknown_method_is_rejected(self):
        with self.assertRaises(ValueError):
            key_from_request('PATCH', 'http://example.com/')

    def test_keys_differ_by_method(self):
        self.assertNotEqual(key_from_request('GET', 'http://example.com/'),
                            key_from_request('HEAD', 'http://example.com/'))

    @data(
        ('GET', 'http://example.com/feed', None),
        ('GET', 'http://Example.com/a/../feed', [('tag', ''), ('limit', '5')]),
        ('HEAD', 'http://example.com', None),
        ('DELETE', 'https://example.com:8443/items/1', None),
        ('POST', 'http://example.com/post.php', None),
    )
    @unpack
    def test_request_and_response_sides_agree(self, method, url, params):
        request = requests.Request(method, url, params=params).prepare()
        response = build_response(request, status=200)

        from_request = key_from_request(request.method, request.url)
        from_response = key_from_response(response)

        self.assertEqual(from_request, from_response)
        self.assertEqual(hash(from_request), hash(from_response))

    def test_response_key_uses_the_request_url(self):
        response = build_response(prepared('GET', 'http://example.com/a/./feed?x=1'))

        self.assertEqual(RequestKey(Method.GET, 'http://example.com/a/feed?x=1'), key_from_response(response))

    def test_response_without_request_is_fatal(self):
        response = build_response(prepared())
        response.request = None

        with self.assertRaises(MissingRequestContext):
            key_from_response(response)
