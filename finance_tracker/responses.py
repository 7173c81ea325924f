"""
Result types rendered at the HTTP boundary.

Clients expect `{"status": 0, ...}` on success and `{"status": 1, "message": ...}`
on failure; these two types are the only place that shape is produced.
"""
from dataclasses import dataclass
from typing import Any, Optional

from flask import jsonify

STATUS_OK = 0
STATUS_ERROR = 1


@dataclass
class Ok:
    data: Any = None
    message: Optional[str] = None
    include_data: bool = True

    def to_response(self):
        body = {'status': STATUS_OK}
        if self.message is not None:
            body['message'] = self.message
        if self.include_data:
            body['data'] = self.data
        return jsonify(body), 200


@dataclass
class Failure:
    message: str
    http_status: int = 400
    include_data: bool = False

    def to_response(self):
        body = {'status': STATUS_ERROR, 'message': self.message}
        if self.include_data:
            body['data'] = None
        return jsonify(body), self.http_status
