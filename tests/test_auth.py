import unittest

import httpx
from httpx_ntlm import HttpNtlmAuth

from asyncsoap import Client, ConfigurationError
from asyncsoap.auth import AuthMethod, basic, from_env, ntlm, resolve

from soap_fixtures import ENDPOINT, StubDefinitions, envelope


class TestAuth(unittest.TestCase):
    def testStrategies(self):
        self.assertIsInstance(basic("user", "secret"), httpx.BasicAuth)
        self.assertIsInstance(ntlm("DOMAIN\\user", "secret"), HttpNtlmAuth)

    def testResolve(self):
        self.assertIsInstance(resolve("NTLM", "user", "secret"), HttpNtlmAuth)
        self.assertIsInstance(resolve(AuthMethod.Basic, "user", "secret"), httpx.BasicAuth)
        with self.assertRaises(ConfigurationError):
            resolve("kerberos", "user", "secret")

    def testPackageExports(self):
        import asyncsoap

        self.assertIs(asyncsoap.resolve, resolve)
        self.assertIs(asyncsoap.from_env, from_env)

    def testFromEnv(self):
        self.assertIsNone(from_env(environ={}))
        auth = from_env(environ={"SOAP_AUTH_USERNAME": "user", "SOAP_AUTH_PASSWORD": "secret"})
        self.assertIsInstance(auth, httpx.BasicAuth)
        auth = from_env("SSC", environ={"SSC_USERNAME": "user", "SSC_METHOD": "ntlm"})
        self.assertIsInstance(auth, HttpNtlmAuth)


class TestClientAuth(unittest.IsolatedAsyncioTestCase):
    async def testBasicAuthHeader(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers.get("Authorization"))
            return httpx.Response(200, content=envelope("<ok/>"))

        http = httpx.AsyncClient(transport=httpx.MockTransport(handler), auth=basic("user", "secret"))
        async with Client(StubDefinitions(), ENDPOINT, http=http) as client:
            await client.call("Ping")
        await http.aclose()

        self.assertEqual(seen, ["Basic dXNlcjpzZWNyZXQ="])


if __name__ == "__main__":
    unittest.main()
