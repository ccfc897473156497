"""HTTP value types — requests, errored requests, responses, headers, params."""
