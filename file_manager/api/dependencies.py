from fastapi import Request

from file_manager.processor.processor import Processor


def get_processor(request: Request) -> Processor:
    return request.app.state.processor
