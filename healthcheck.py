import sys
import http.client
import os

# 从环境变量或默认值获取端口
PORT = int(os.getenv("PORT", 5000))
HOST = os.getenv("HEALTHCHECK_HOST", "localhost")
PATH = "/health"


def check() -> int:
    conn = http.client.HTTPConnection(HOST, PORT, timeout=5)
    try:
        conn.request("GET", PATH)
        response = conn.getresponse()

        # 检查返回的状态码是否为 2xx (成功)
        if 200 <= response.status < 300:
            print(f"Health check passed with status: {response.status}")
            return 0
        print(f"Health check failed with status: {response.status}")
        return 1
    except (OSError, http.client.HTTPException) as e:
        print(f"Health check failed with error: {e}")
        return 1
    finally:
        conn.close()


if __name__ == "__main__":
    sys.exit(check())
