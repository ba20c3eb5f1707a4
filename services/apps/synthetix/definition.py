from services.apps.definition import AppDefinition, AppGroup
from services.positions.models import ContractType, Network

SYNTHETIX_DEFINITION = AppDefinition(
    id="synthetix",
    name="Synthetix",
    groups={
        "synth": AppGroup(id="synth", type=ContractType.APP_TOKEN, label="Synths"),
        "farm": AppGroup(id="farm", type=ContractType.POSITION, label="Staking"),
    },
    networks=(
        Network.ETHEREUM_MAINNET,
        Network.OPTIMISM_MAINNET,
    ),
)
