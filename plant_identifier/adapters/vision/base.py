class VisionAdapter:
    ready: bool = True

    async def generate(self, prompt: str, image_b64: str, media_type: str) -> str:
        """Send one instruction + inline image, return the raw reply text.

        Raises ServiceFailure on transport errors, non-success responses,
        missing credentials or an empty reply.
        """
        raise NotImplementedError
