from django.http import JsonResponse


class Result:
    """Outcome of one operation: a kind, an optional payload and its status."""

    OK = "Ok"

    def __init__(self, kind, payload=None, status=200):
        self.kind = kind
        self.payload = payload
        self.status = status

    @classmethod
    def ok(cls, payload=None, status=200):
        return cls(cls.OK, payload, status)

    @classmethod
    def created(cls, payload):
        return cls(cls.OK, payload, 201)

    @classmethod
    def failure(cls, error):
        payload = {"kind": error.kind, "error": error.message}
        if error.errors:
            payload["errors"] = error.errors
        return cls(error.kind, payload, error.status)

    @property
    def is_ok(self):
        return self.kind == self.OK

    def as_response(self):
        return JsonResponse(self.payload if self.payload is not None else {}, status=self.status)

    def __repr__(self):
        return f"<Result {self.kind} {self.status}>"
