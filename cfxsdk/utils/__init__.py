# Copyright 2018 ICON Foundation
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
""" A module for utility"""

from binascii import unhexlify
from urllib.parse import urlparse

import verboselogs

from cfxsdk import configure as conf

logger = verboselogs.VerboseLogger("cfxsdk")

USER_ADDRESS_TYPE = 0x10


def long_to_bytes(val, endianness='big'):
    """Use :ref:`string formatting` and :func:`~binascii.unhexlify` to
    convert ``val``, a :func:`long`, to a byte :func:`str`.

    :param long val: The value to pack

    :param str endianness: The endianness of the result. ``'big'`` for
      big-endian, ``'little'`` for little-endian.
    """

    # one (1) hex digit per four (4) bits
    width = val.bit_length()

    # unhexlify wants an even multiple of eight (8) bits, but we don't
    # want more digits than we need (hence the ternary-ish 'or')
    width += 8 - ((width % 8) or 8)

    # format width specifier: four (4) bits per hex digit
    fmt = '%%0%dx' % (width // 4)

    # prepend zero (0) to the width, to zero-pad the output
    s = unhexlify(fmt % val)

    if endianness == 'little':
        s = s[::-1]

    return s


def address_from_pubkey(pubkey: bytes) -> str:
    """Derive a user account address from an uncompressed public key.

    The address is the last 20 bytes of keccak256(pubkey without the 0x04 tag)
    and its first nibble is replaced by the user account type (0x1).
    """
    from cfxsdk.crypto.hashing import keccak256

    if len(pubkey) == 65:
        pubkey = pubkey[1:]
    if len(pubkey) != 64:
        raise ValueError(f"Invalid public key size({len(pubkey)})")

    address = bytearray(keccak256(pubkey)[-20:])
    address[0] = USER_ADDRESS_TYPE | (address[0] & 0x0f)
    return "0x" + address.hex()


def normalize_request_url(url_input: str) -> str:
    """Make `{scheme}://{netloc}{path}` from a loosely written node url.

    ex) '' => conf.NODE_URL, '12537' => http://localhost:12537,
        '127.0.0.1:12537' => http://127.0.0.1:12537,
        'main.confluxrpc.org' => https://main.confluxrpc.org,
        'https://host/v1/key' => https://host/v1/key
    """
    if not url_input:
        url_input = conf.NODE_URL

    if url_input.isdigit():
        url_input = f"http://localhost:{url_input}"
    elif '://' not in url_input:
        if ':' in url_input and url_input.split(':')[1].isdigit():
            url_input = f"http://{url_input}"
        else:
            url_input = f"https://{url_input}"

    parsed = urlparse(url_input)
    return f"{parsed.scheme}://{parsed.netloc}{parsed.path.rstrip('/')}"
