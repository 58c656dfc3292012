# Core module for Halo Timer application: session state machine and layout
