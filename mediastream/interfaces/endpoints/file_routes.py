import logging
import os
import urllib.parse
import uuid
from typing import Dict, Optional

from fastapi import APIRouter, Depends, File, Header, Query, UploadFile
from pydantic import ValidationError
from starlette.background import BackgroundTask
from starlette.responses import Response as HTTPResponse
from starlette.responses import StreamingResponse

from mediastream.application.errors.exceptions import BadRequestError
from mediastream.application.services.delete_service import FileDeleteService
from mediastream.application.services.file_metadata_service import FileMetadataService
from mediastream.application.services.stream_service import FileStreamService
from mediastream.application.services.upload_service import FileUploadService
from mediastream.core.config import get_settings
from mediastream.domain.models.file_category import FileCategory
from mediastream.domain.models.streamable_content import StreamableContent
from mediastream.domain.models.upload import UploadRequest
from mediastream.domain.services.file_type_detector import FileTypeDetector
from mediastream.interfaces.schemas import Response
from mediastream.interfaces.schemas.file import FileInfoResponse, PagedResponse, UploadResponse
from mediastream.interfaces.service_dependencies import (
    get_delete_service,
    get_file_metadata_service,
    get_file_type_detector,
    get_stream_service,
    get_upload_service,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/files", tags=["文件模块"])


def get_base_url() -> str:
    """对外的API基础地址，用于拼接流地址与缩略图地址"""
    settings = get_settings()
    base_path = settings.api_base_path.rstrip("/")
    if settings.public_base_url:
        return f"{settings.public_base_url.rstrip('/')}{base_path}"
    return base_path


def _measure(upload_file: UploadFile) -> int:
    """获取上传文件的字节大小"""
    if upload_file.size is not None:
        return upload_file.size
    upload_file.file.seek(0, os.SEEK_END)
    size = upload_file.file.tell()
    upload_file.file.seek(0)
    return size


def _streaming_response(content: StreamableContent, status_code: int, disposition: str) -> StreamingResponse:
    """构建流式响应，字节流在迭代结束、异常或客户端断开后关闭"""
    headers: Dict[str, str] = {
        "Accept-Ranges": "bytes",
        "Content-Length": str(content.content_length),
        "Content-Disposition": disposition,
    }
    if content.is_partial():
        headers["Content-Range"] = content.content_range_header()

    return StreamingResponse(
        content.iter_chunks(),
        status_code=status_code,
        media_type=content.media_type,
        headers=headers,
        background=BackgroundTask(content.close),
    )


@router.post(
    path="",
    status_code=201,
    response_model=Response[UploadResponse],
    summary="文件上传接口",
    description="上传文件到本地存储，图片与视频会尝试生成缩略图",
)
def upload_file(
    file: UploadFile = File(...),
    upload_service: FileUploadService = Depends(get_upload_service),
    file_type_detector: FileTypeDetector = Depends(get_file_type_detector),
    base_url: str = Depends(get_base_url),
) -> Response[UploadResponse]:
    """文件上传接口，传递文件返回上传结果"""
    # 1.补全media-type，客户端未声明时根据扩展名推断
    original_name = file.filename or ""
    media_type = file.content_type or file_type_detector.media_type_for(
        file_type_detector.extract_extension(original_name)
    )

    # 2.构建上传命令
    try:
        request = UploadRequest(
            original_name=original_name,
            media_type=media_type,
            size=_measure(file),
            stream=file.file,
        )
    except ValidationError as e:
        raise BadRequestError(f"上传参数错误: {e.errors()[0].get('msg', '')}") from e

    # 3.执行上传
    outcome = upload_service.upload(request)
    return Response.success(
        code=201,
        msg="上传文件成功",
        data=UploadResponse.from_outcome(outcome, base_url),
    )


@router.get(
    path="",
    response_model=Response[PagedResponse[FileInfoResponse]],
    summary="文件列表接口",
    description="按创建时间倒序分页查询文件，可以按分类过滤",
)
def list_files(
    page: int = Query(0),
    size: int = Query(20),
    category: Optional[FileCategory] = Query(None),
    metadata_service: FileMetadataService = Depends(get_file_metadata_service),
    base_url: str = Depends(get_base_url),
) -> Response[PagedResponse[FileInfoResponse]]:
    if category is None:
        records = metadata_service.list_files(page, size)
        total = metadata_service.count()
    else:
        records = metadata_service.list_by_category(category, page, size)
        total = metadata_service.count_by_category(category)
    return Response.success(
        msg="获取文件列表成功",
        data=PagedResponse[FileInfoResponse](
            items=[FileInfoResponse.from_record(record, base_url) for record in records],
            page=page,
            size=size,
            total=total,
        ),
    )


@router.get(
    path="/{file_id}",
    response_model=Response[FileInfoResponse],
    summary="获取文件信息接口",
)
def get_file_info(
    file_id: uuid.UUID,
    metadata_service: FileMetadataService = Depends(get_file_metadata_service),
    base_url: str = Depends(get_base_url),
) -> Response[FileInfoResponse]:
    record = metadata_service.get_by_id(file_id)
    return Response.success(
        msg="获取文件信息成功",
        data=FileInfoResponse.from_record(record, base_url),
    )


@router.get(
    path="/{file_id}/stream",
    summary="文件流式读取接口",
    description="支持单区间Range请求，命中Range时返回206部分内容",
)
def stream_file(
    file_id: uuid.UUID,
    range_header: Optional[str] = Header(None, alias="Range"),
    stream_service: FileStreamService = Depends(get_stream_service),
) -> StreamingResponse:
    # 1.调用服务打开文件内容
    content = stream_service.stream(file_id, range_header)

    # 2.对文件中的中文名字进行url编码
    encoded_filename = urllib.parse.quote(content.record.original_name)

    # 3.返回流式响应
    return _streaming_response(
        content,
        status_code=206 if content.is_partial() else 200,
        disposition=f"inline; filename*=UTF-8''{encoded_filename}",
    )


@router.get(
    path="/{file_id}/thumbnail",
    summary="文件缩略图接口",
)
def get_thumbnail(
    file_id: uuid.UUID,
    stream_service: FileStreamService = Depends(get_stream_service),
) -> StreamingResponse:
    content = stream_service.get_thumbnail(file_id)
    return _streaming_response(
        content,
        status_code=200,
        disposition=f"inline; filename=\"{file_id}_thumb.jpg\"",
    )


@router.delete(
    path="/{file_id}",
    status_code=204,
    summary="文件删除接口",
    description="删除文件字节、缩略图以及文件记录",
)
def delete_file(
    file_id: uuid.UUID,
    delete_service: FileDeleteService = Depends(get_delete_service),
) -> HTTPResponse:
    delete_service.delete(file_id)
    return HTTPResponse(status_code=204)
