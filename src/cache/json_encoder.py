"""
JSON encoder for cached values.
"""

import json
import decimal


class CacheEncoder(json.JSONEncoder):
    """Encodes Decimals as strings so cached prices keep their exact digits"""
    def default(self, obj):
        if isinstance(obj, decimal.Decimal):
            return str(obj)
        # Let the base class default method handle other types
        return super(CacheEncoder, self).default(obj)
