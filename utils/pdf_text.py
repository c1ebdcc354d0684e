import asyncio
from io import BytesIO
from typing import List
from PyPDF2 import PdfReader
from utils.logger import get_logger

logger = get_logger("pdf_text")


class PdfTextExtractor:
    """Best-effort plain text extraction. Unreadable PDFs give an empty string."""

    async def extract(self, pdf_bytes: bytes) -> str:
        return await asyncio.to_thread(self._extract_sync, pdf_bytes)

    def _extract_sync(self, pdf_bytes: bytes) -> str:
        # PyPDF2 raises many different types on corrupt input
        try:
            reader = PdfReader(BytesIO(pdf_bytes))
            pages = list(reader.pages)
        except Exception as e:
            logger.warning(f"Could not read PDF ({len(pdf_bytes)} bytes): {e}")
            return ""

        text_chunks: List[str] = []
        for index, page in enumerate(pages):
            try:
                text_chunks.append(page.extract_text() or "")
            except Exception as e:
                # skip the page, keep the rest
                logger.warning(f"Could not extract text from page {index + 1}: {e}")
        return "\n".join(text_chunks).strip()
