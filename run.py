# run.py
import asyncio
import logging
import os

from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))
# 이 디렉터리 안의 '.env' 파일을 먼저 로드합니다.
load_dotenv(dotenv_path=os.path.join(basedir, '.env'))

from comment_widget import create_widget
from comment_widget.utils.datetime_utils import DateTimeUtils


async def main():
    widget = create_widget()

    id_token = os.getenv('WIDGET_ID_TOKEN')
    if id_token:
        await widget.sign_in(id_token)

    comments = await widget.start() or []
    logging.info(f"멘션 가능한 사용자: {len(widget.directory.users)}명, 첫 페이지 댓글: {len(comments)}건")
    for comment in comments:
        created = DateTimeUtils.to_iso_string(comment.created_at) if comment.created_at else "-"
        logging.info(f"[{created}] {comment.author_name}: {comment.text[:50]} {comment.reactions.to_dict()}")

    if widget.feed.has_more:
        more = await widget.load_more() or []
        logging.info(f"다음 페이지 댓글: {len(more)}건")


if __name__ == '__main__':
    asyncio.run(main())
