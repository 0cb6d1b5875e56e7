from typing import Annotated

from pydantic import Field

from univ3_deployer.constants import MAX_UINT256, MIN_UINT256

type ValidatedUint256 = Annotated[int, Field(strict=True, ge=MIN_UINT256, le=MAX_UINT256)]
