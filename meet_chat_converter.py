"""
Google Meet Chat Converter
Extracts chat entries from a saved Google Meet chat panel (HTML) and writes
them as plain text and Markdown, with a logged summary of who said what.
"""

import argparse
import logging
import re
import sys
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, NamedTuple, Optional, Tuple

import pandas as pd

__version__ = "0.0.1"

MARKDOWN_HEADING = "# Google Meet Chat Log"
EMPTY_LOG_MESSAGE = "No chat messages found."

# One chat entry in the Meet export markup. Captures: speaker, message body.
CHAT_ENTRY_PATTERN = re.compile(
    r'<div class="nMcdL bj4p3b">.*?'
    r'<span class="NWpY1d">(.*?)</span>.*?'
    r'<div class="ygicle VbkSUe">(.*?)</div>.*?'
    r'</div>',
    re.DOTALL,
)

logger = logging.getLogger(__name__)


class ChatEntry(NamedTuple):
    """A single chat message: who said it and what they said."""

    speaker: str
    message: str


def extract_chat_log(html_content: str) -> Tuple[ChatEntry, ...]:
    """
    Extract chat entries from raw Meet export HTML.

    Matching is non-greedy, so a message body ends at its first ``</div>``
    even if the message text itself contains one.

    Args:
        html_content: Raw HTML text

    Returns:
        Tuple of ChatEntry in document order (empty if nothing matched)
    """
    return tuple(
        ChatEntry(match.group(1).strip(), match.group(2).strip())
        for match in CHAT_ENTRY_PATTERN.finditer(html_content)
    )


def render_text(entries: Iterable[ChatEntry]) -> str:
    """Render entries as ``Speaker: message`` blocks separated by a blank line."""
    return '\n\n'.join(f"{entry.speaker}: {entry.message}" for entry in entries)


def render_markdown(entries: Iterable[ChatEntry]) -> str:
    """Render entries as a Markdown document with a bold speaker per entry."""
    formatted = '\n\n'.join(f"**{entry.speaker}:** {entry.message}" for entry in entries)
    return f"{MARKDOWN_HEADING}\n\n{formatted}"


def output_selection(txt_only: bool, md_only: bool) -> Tuple[bool, bool]:
    """
    Map the ``--txt-only`` / ``--md-only`` flags to ``(write_txt, write_md)``.

    Each flag only suppresses the other format, so setting both writes both files.
    """
    return txt_only or not md_only, md_only or not txt_only


def default_output_base(html_file) -> Path:
    """``<input dir>/<input stem>_chat``, the base used when none is given."""
    html_file = Path(html_file)
    return html_file.parent / f"{html_file.stem}_chat"


class MeetChatConverter:
    """Main converter class for Google Meet chat HTML to text and Markdown."""

    def __init__(self, html_file: str, output_base: Optional[str] = None,
                 write_txt: bool = True, write_md: bool = True,
                 log_file: bool = False, verbose: bool = False):
        """
        Initialize converter.

        Args:
            html_file: Path to the saved Meet chat HTML
            output_base: Output path without extension (defaults to <input>_chat)
            write_txt: Write the plain-text file
            write_md: Write the Markdown file
            log_file: Also write the run log beside the outputs
            verbose: Log at DEBUG level
        """
        self.html_file = Path(html_file)
        self.output_base = Path(output_base) if output_base else default_output_base(self.html_file)
        self.write_txt = write_txt
        self.write_md = write_md

        self.log_file = None
        if log_file:
            self.log_file = self.output_base.parent / (
                f"{self.output_base.name}_log_{datetime.now().strftime('%Y%m%d_%H%M%S')}.txt"
            )
        self._file_handler = None
        self._previous_level = logger.level
        self._setup_logging(logging.DEBUG if verbose else logging.INFO)

        self.entries: Tuple[ChatEntry, ...] = ()
        self.stats = {
            'total_messages': 0,
            'unique_speakers': 0,
            'empty_messages': 0,
            'files_written': [],
            'processing_time': 0,
        }

    @property
    def txt_path(self) -> Path:
        return self.output_base.parent / f"{self.output_base.name}.txt"

    @property
    def md_path(self) -> Path:
        return self.output_base.parent / f"{self.output_base.name}.md"

    def _setup_logging(self, level: int):
        """Configure logging to console and, if requested, to a log file."""
        logging.basicConfig(
            level=level,
            format='%(asctime)s - %(levelname)s - %(message)s',
            handlers=[logging.StreamHandler()]
        )
        self.logger = logger
        self.logger.setLevel(level)

        if self.log_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            self._file_handler = logging.FileHandler(self.log_file, encoding='utf-8')
            self._file_handler.setFormatter(
                logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')
            )
            self.logger.addHandler(self._file_handler)

    def _restore_logging(self):
        """Detach the log file and put the module logger back at its previous level."""
        if self._file_handler is not None:
            self.logger.removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None
        self.logger.setLevel(self._previous_level)

    def parse_html(self) -> Tuple[ChatEntry, ...]:
        """
        Read the HTML file and extract chat entries.

        Returns:
            Tuple of ChatEntry

        Raises:
            FileNotFoundError: If the input file does not exist
        """
        self.logger.info(f"Parsing HTML file: {self.html_file}")

        # Undecodable bytes become U+FFFD; CRLF inside messages is kept as-is.
        with open(self.html_file, 'r', encoding='utf-8', errors='replace', newline='') as f:
            html_content = f.read()

        self.entries = extract_chat_log(html_content)
        self.stats['total_messages'] = len(self.entries)
        self.stats['unique_speakers'] = len({entry.speaker for entry in self.entries})
        self.stats['empty_messages'] = sum(1 for entry in self.entries if not entry.message)

        self.logger.info(f"Extracted {len(self.entries)} messages from HTML")
        return self.entries

    def to_dataframe(self) -> pd.DataFrame:
        """Extracted entries as a DataFrame with index, speaker and message columns."""
        return pd.DataFrame(
            [
                {'index': idx, 'speaker': entry.speaker, 'message': entry.message}
                for idx, entry in enumerate(self.entries)
            ],
            columns=['index', 'speaker', 'message'],
        )

    def _write(self, path: Path, content: str, label: str, empty: bool):
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8', newline='\n') as f:
            f.write(content)
        self.stats['files_written'].append(str(path))

        if empty:
            self.logger.info(f"Empty chat log ({label}) created at: {path}")
        else:
            self.logger.info(f"Chat log ({label}) successfully saved to: {path}")

    def save_outputs(self) -> List[str]:
        """
        Write the requested text and Markdown files.

        An empty chat log still produces the files, with placeholder content.

        Returns:
            List of written file paths
        """
        empty = not self.entries
        if empty:
            self.logger.warning("No chat messages found in the provided HTML file.")
            text = EMPTY_LOG_MESSAGE
            markdown = f"{MARKDOWN_HEADING}\n\n{EMPTY_LOG_MESSAGE}"
        else:
            text = render_text(self.entries)
            markdown = render_markdown(self.entries)

        written = []
        if self.write_txt:
            self._write(self.txt_path, text, 'TXT', empty)
            written.append(str(self.txt_path))
        if self.write_md:
            self._write(self.md_path, markdown, 'MD', empty)
            written.append(str(self.md_path))
        return written

    def generate_summary_report(self):
        """Log summary statistics for the conversion."""
        self.logger.info("=" * 60)
        self.logger.info("CHAT LOG SUMMARY")
        self.logger.info("=" * 60)
        self.logger.info(f"Input file: {self.html_file}")
        self.logger.info(f"Total messages extracted: {self.stats['total_messages']:,}")
        self.logger.info(f"Empty messages: {self.stats['empty_messages']:,}")

        df = self.to_dataframe()
        if not df.empty:
            self.logger.info(f"Unique speakers: {self.stats['unique_speakers']}")
            self.logger.info("Top 5 speakers:")
            for speaker, count in df['speaker'].value_counts().head().items():
                self.logger.info(f"  {speaker}: {count:,} messages")

        for path in self.stats['files_written']:
            self.logger.info(f"Output: {path}")
        self.logger.info(f"Processing time: {self.stats['processing_time']:.2f} seconds")
        if self.log_file:
            self.logger.info(f"Log file: {self.log_file}")
        self.logger.info("=" * 60)

    def convert(self) -> List[str]:
        """
        Main conversion process.

        Returns:
            List of written file paths
        """
        start_time = datetime.now()

        try:
            self.parse_html()
            written = self.save_outputs()
            self.stats['processing_time'] = (datetime.now() - start_time).total_seconds()
            self.generate_summary_report()
            return written
        except Exception as e:
            self.logger.debug(f"Conversion failed: {e}", exc_info=True)
            raise
        finally:
            self._restore_logging()


def convert_meet_chat(html_file: str, output_base: Optional[str] = None,
                      txt_only: bool = False, md_only: bool = False) -> List[str]:
    """
    Convenience function for converting Meet chat HTML to text and Markdown.

    Passing both ``txt_only`` and ``md_only`` writes both files.

    Args:
        html_file: Path to HTML file
        output_base: Output path without extension (optional)
        txt_only: Skip the Markdown file
        md_only: Skip the text file

    Returns:
        List of written file paths
    """
    write_txt, write_md = output_selection(txt_only, md_only)
    converter = MeetChatConverter(html_file, output_base,
                                  write_txt=write_txt, write_md=write_md)
    return converter.convert()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='meet-chat-converter',
        description='Extracts chat logs from Google Meet HTML files and saves them '
                    'to text and markdown files',
    )
    parser.add_argument('html_file', help='Path to the HTML file containing the chat log')
    parser.add_argument('-o', '--output', help='Output file path (without extension)')
    parser.add_argument('--txt-only', action='store_true', help='Only generate .txt file')
    parser.add_argument('--md-only', action='store_true', help='Only generate .md file')
    parser.add_argument('--log-file', action='store_true',
                        help='Also write the run log beside the outputs')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point. Returns the process exit status."""
    args = build_parser().parse_args(argv)

    try:
        write_txt, write_md = output_selection(args.txt_only, args.md_only)
        converter = MeetChatConverter(
            args.html_file,
            args.output,
            write_txt=write_txt,
            write_md=write_md,
            log_file=args.log_file,
            verbose=args.verbose,
        )
        written = converter.convert()
    except FileNotFoundError:
        logger.error(f"Error: File not found at '{args.html_file}'. Please check the path.")
        return 1
    except Exception as e:
        logger.error(f"An unexpected error occurred: {e}")
        return 1

    print("\nConversion complete!")
    for path in written:
        print(f"Output: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
