#
# Copyright 2024 zhlinh and ccgo Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.


class CliResult:
    def __init__(self, value=None, error=None):
        self.value = value
        self.error = error

    def is_success(self):
        return self.error is None

    def is_failure(self):
        return self.error is not None

    def get_value(self, default=None):
        if self.is_success():
            return self.value
        else:
            return default

    def get_error(self, default=None):
        if self.is_failure():
            return self.error
        else:
            return default


class PlistEditResult(CliResult):
    """
    Outcome of a single property list edit.

    A failed edit is either "key absent" (the key does not exist yet and may
    be added instead) or any other failure, which callers must treat as fatal.
    """

    def __init__(self, value=None, error=None, key_absent=False):
        super().__init__(value, error)
        self.key_absent = key_absent

    @classmethod
    def ok(cls, value=None):
        return cls(value=value)

    @classmethod
    def missing_key(cls, error):
        return cls(error=error, key_absent=True)

    @classmethod
    def failed(cls, error):
        return cls(error=error)

    def is_key_absent(self):
        return self.is_failure() and self.key_absent
