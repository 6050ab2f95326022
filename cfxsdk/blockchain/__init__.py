from .types import Bytes, VarBytes, Hash32, Address, BigInt, Signature, MalformedStr, int_fromhex
from .exception import *
