class LengthMismatchError(ValueError):
  def __init__(self, codec, multiple, length):
    super().__init__("{} input length must be a multiple of {}, got {}".format(codec, multiple, length))
    self.codec = codec
    self.multiple = multiple
    self.length = length
