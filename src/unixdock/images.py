"""
Docker Images API
"""

import json
import logging
from typing import List, Dict, Any, Optional
from .exceptions import APIError, ContainerNotFound, ImageNotFound

logger = logging.getLogger(__name__)


class Image:
    """Docker Image object"""

    def __init__(self, attrs: Dict[str, Any], collection):
        self.collection = collection
        self._set_attrs(attrs)

    def _set_attrs(self, attrs: Dict[str, Any]):
        self.attrs = attrs
        self.id = attrs.get('Id', '')
        self.short_id = self.id.split(':', 1)[-1][:12] if self.id else ''
        self.tags = attrs.get('RepoTags') or []
        self.size = attrs.get('Size', 0)

    def __repr__(self):
        return f"<Image: {self.tags[0] if self.tags else self.short_id}>"

    def reload(self):
        self._set_attrs(self.collection.inspect(self.id))
        return self

    def history(self) -> List[Dict[str, Any]]:
        return self.collection.history(self.id)

    def save(self) -> bytes:
        """Export this image as a tar archive"""
        return self.collection.save(self.id)

    def remove(self, force: bool = False, noprune: bool = False):
        """Remove this image"""
        return self.collection.remove(self.id, force=force, noprune=noprune)


def parse_progress(body: bytes) -> List[Dict[str, Any]]:
    """
    Parse a newline-delimited JSON progress body (pull, push, build)

    Raises:
        APIError: A progress message reported an error
    """
    messages = []
    for line in body.splitlines():
        line_str = line.decode('utf-8', errors='replace').strip()
        if not line_str:
            continue
        try:
            data = json.loads(line_str)
        except json.JSONDecodeError:
            logger.debug(f"Skipping non-JSON progress line: {line_str}")
            continue

        if 'error' in data:
            error_msg = data['error']
            if 'errorDetail' in data:
                error_msg = data['errorDetail'].get('message', error_msg)
            raise APIError(f"Docker API error: {error_msg}", explanation=error_msg)
        messages.append(data)
    return messages


class ImageCollection:
    """Docker Images collection"""

    def __init__(self, client):
        self.client = client

    @property
    def http(self):
        return self.client.http

    def list(self, name: Optional[str] = None, all: bool = False,
             filters: Optional[Dict[str, Any]] = None, digests: bool = False) -> List[Image]:
        """
        List images

        Args:
            name: Filter by image name
            all: Show all images (including intermediates)
            filters: Filters to apply
            digests: Include RepoDigests on each image

        Returns:
            List of Image objects
        """
        params = {'all': all}
        if filters:
            params['filters'] = filters
        if digests:
            params['digests'] = digests

        images_data = self.http.get('/images/json', params=params) or []
        images = [Image(img_data, self) for img_data in images_data]

        if name:
            images = [img for img in images if any(name in tag for tag in img.tags)]

        return images

    def inspect(self, name: str) -> Dict[str, Any]:
        return self.http.get(f'/images/{name}/json', not_found=ImageNotFound)

    def get(self, name: str) -> Image:
        """
        Get image by name or ID

        Args:
            name: Image name or ID

        Returns:
            Image object

        Raises:
            ImageNotFound: If image not found
        """
        return Image(self.inspect(name), self)

    def pull(self, repository: str, tag: str = 'latest',
             platform: Optional[str] = None) -> Image:
        """
        Pull image from registry

        Args:
            repository: Repository name
            tag: Image tag
            platform: Platform (e.g., linux/amd64)

        Returns:
            Image object
        """
        params = {'fromImage': repository, 'tag': tag, 'platform': platform}
        body = self.http.post('/images/create', params=params, raw=True,
                              not_found=ImageNotFound)
        for message in parse_progress(body):
            if 'status' in message:
                logger.debug(f"Pull {repository}:{tag}: {message['status']}")

        return self.get(f"{repository}:{tag}")

    def history(self, name: str) -> List[Dict[str, Any]]:
        """Parent layers of an image"""
        return self.http.get(f'/images/{name}/history', not_found=ImageNotFound)

    def remove(self, image: str, force: bool = False,
               noprune: bool = False) -> List[Dict[str, str]]:
        """
        Remove image

        Args:
            image: Image name or ID
            force: Force removal
            noprune: Don't delete untagged parents

        Returns:
            List of {'Untagged': ...} / {'Deleted': ...} records
        """
        params = {'force': force, 'noprune': noprune}
        result = self.http.delete(f'/images/{image}', params=params, not_found=ImageNotFound)
        logger.debug(f"Removed image {image}")
        return result or []

    def search(self, term: str, limit: int = 10,
               filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Search Docker Hub"""
        params = {'term': term, 'limit': limit, 'filters': filters}
        return self.http.get('/images/search', params=params)

    def commit(self, container: str, repository: Optional[str] = None,
               tag: Optional[str] = None, message: Optional[str] = None,
               author: Optional[str] = None, changes: Optional[str] = None,
               conf: Optional[Dict[str, Any]] = None) -> Image:
        """
        Create an image from a container's changes

        Args:
            container: Container ID or name
            repository: Repository for the new image
            tag: Tag for the new image
            message: Commit message
            author: Author of the image
            changes: Dockerfile instructions to apply
            conf: Container config for the new image

        Returns:
            Image object
        """
        params = {
            'container': container,
            'repo': repository,
            'tag': tag,
            'comment': message,
            'author': author,
            'changes': changes,
        }
        result = self.http.post('/commit', params=params, data=conf or {},
                                not_found=ContainerNotFound)
        return self.get(result['Id'])

    def save(self, name: str) -> bytes:
        """Export image as a tar archive"""
        return self.http.get(f'/images/{name}/get', raw=True, not_found=ImageNotFound)
